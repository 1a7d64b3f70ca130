"""Property listing use cases"""

import logging
from typing import Any, List, Mapping, Optional, Union

from ...api.event_broadcaster import InvalidationBroadcaster
from ...core.config import settings
from ...core.exceptions import NotFoundError, PermissionDeniedError, ValidationFailure
from ...domain.entities.property import Property
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import PropertyId, UserId
from ...domain.value_objects.property_details import Location, Rates, SellerInfo
from ...domain.value_objects.session import SessionIdentity
from ..dtos.property_dtos import PropertyDeleteResult, PropertyDto, PropertyListResult
from ..dtos.results import ActionResult, ErrorKind, ValidationResult, action_error, failure
from ..validation import PropertyForm, validate_fields

logger = logging.getLogger(__name__)

PROPERTY_PATHS = ("/properties", "/")


def _parse_property_id(property_id: str) -> Optional[PropertyId]:
    try:
        return PropertyId.from_str(property_id)
    except (ValueError, TypeError):
        return None


def _parse_owner_id(owner_id: str) -> Optional[UserId]:
    try:
        return UserId.from_str(owner_id)
    except (ValueError, TypeError):
        return None


def _listing_fields(form: PropertyForm) -> dict:
    """Map a validated form onto Property constructor arguments"""
    return dict(
        name=form.name,
        type=form.type,
        description=form.description or None,
        location=Location(**form.location.model_dump()),
        beds=form.beds,
        baths=form.baths,
        square_feet=form.square_feet,
        amenities=[a for a in form.amenities if a],
        rates=Rates(**form.rates.model_dump()),
        seller_info=SellerInfo(**form.seller_info.model_dump()),
        images=[i for i in form.images if i],
    )


def _can_manage(identity: SessionIdentity, listing: Property) -> bool:
    return identity.isadmin or listing.is_owned_by(identity.id)


class PropertyUseCases:
    """Browsing and managing rental listings.

    Reads never fail loudly: storage errors are logged and an empty result is
    returned, so listing pages still render. Mutations return structured
    results and signal invalidation of the listing pages.
    """

    def __init__(self, unit_of_work: IUnitOfWork, invalidator: InvalidationBroadcaster):
        self.unit_of_work = unit_of_work
        self.invalidator = invalidator

    async def fetch_properties(self, page: Optional[int] = None, page_size: Optional[int] = None) -> PropertyListResult:
        if page is not None:
            page = max(page, 1)
            page_size = min(max(page_size or settings.DEFAULT_PAGE_SIZE, 1), settings.MAX_PAGE_SIZE)
        try:
            async with self.unit_of_work:
                listings, total = await self.unit_of_work.properties.list(page, page_size)
        except Exception:
            logger.exception("Failed to fetch properties")
            return PropertyListResult(properties=[], total=0)
        return PropertyListResult(properties=[PropertyDto.from_entity(p) for p in listings], total=total)

    async def fetch_property_by_id(self, property_id: str) -> Optional[PropertyDto]:
        pid = _parse_property_id(property_id)
        if pid is None:
            return None
        try:
            async with self.unit_of_work:
                listing = await self.unit_of_work.properties.get_by_id(pid)
        except Exception:
            logger.exception("Failed to fetch property %s", property_id)
            return None
        return PropertyDto.from_entity(listing) if listing else None

    async def fetch_featured_properties(self, limit: int = settings.FEATURED_PROPERTIES_LIMIT) -> List[PropertyDto]:
        try:
            async with self.unit_of_work:
                listings = await self.unit_of_work.properties.list_featured(limit)
        except Exception:
            logger.exception("Failed to fetch featured properties")
            return []
        return [PropertyDto.from_entity(p) for p in listings]

    async def fetch_properties_by_owner(self, owner_id: str) -> List[PropertyDto]:
        oid = _parse_owner_id(owner_id)
        if oid is None:
            return []
        try:
            async with self.unit_of_work:
                listings = await self.unit_of_work.properties.list_by_owner(oid)
        except Exception:
            logger.exception("Failed to fetch properties for owner %s", owner_id)
            return []
        return [PropertyDto.from_entity(p) for p in listings]

    async def search_properties(self, location: Optional[str] = None, property_type: Optional[str] = None) -> List[PropertyDto]:
        try:
            async with self.unit_of_work:
                listings = await self.unit_of_work.properties.search(location, property_type)
        except Exception:
            logger.exception("Property search failed")
            return []
        return [PropertyDto.from_entity(p) for p in listings]

    async def add_property(
        self,
        identity: Optional[SessionIdentity],
        fields: Mapping[str, Any],
    ) -> Union[ActionResult, ValidationResult]:
        if identity is None:
            return failure("You must be signed in to add a property", ErrorKind.AUTH)
        try:
            form = validate_fields(PropertyForm, fields)
        except ValidationFailure as e:
            return ValidationResult.from_failure(e)

        try:
            listing = Property.create(owner_id=UserId.from_str(identity.id), **_listing_fields(form))
            async with self.unit_of_work:
                await self.unit_of_work.properties.add(listing)
                await self.unit_of_work.commit()
        except Exception as e:
            return action_error(logger, e, "Failed to add property")

        logger.info("Property %s added by user %s", listing.id, identity.id)
        await self.invalidator.revalidate(*PROPERTY_PATHS)
        return ActionResult(
            success=True,
            message="Property added successfully",
            data=PropertyDto.from_entity(listing).model_dump(mode="json"),
        )

    async def update_property(
        self,
        identity: Optional[SessionIdentity],
        property_id: str,
        fields: Mapping[str, Any],
    ) -> Union[ActionResult, ValidationResult]:
        if identity is None:
            return failure("You must be signed in to edit a property", ErrorKind.AUTH)
        try:
            form = validate_fields(PropertyForm, fields)
        except ValidationFailure as e:
            return ValidationResult.from_failure(e)

        pid = _parse_property_id(property_id)
        if pid is None:
            return failure("Property not found", ErrorKind.NOT_FOUND)

        try:
            async with self.unit_of_work:
                listing = await self.unit_of_work.properties.get_by_id(pid)
                if listing is None:
                    raise NotFoundError("Property", property_id)
                if not _can_manage(identity, listing):
                    raise PermissionDeniedError("You can only edit your own properties")
                listing.apply(**_listing_fields(form))
                await self.unit_of_work.properties.update(listing)
                await self.unit_of_work.commit()
        except NotFoundError:
            return failure("Property not found", ErrorKind.NOT_FOUND)
        except PermissionDeniedError as e:
            logger.warning("User %s tried to edit property %s", identity.id, property_id)
            return failure(str(e), ErrorKind.PERMISSION)
        except Exception as e:
            return action_error(logger, e, "Failed to update property")

        await self.invalidator.revalidate(*PROPERTY_PATHS)
        return ActionResult(
            success=True,
            message="Property updated successfully",
            data=PropertyDto.from_entity(listing).model_dump(mode="json"),
        )

    async def delete_property(self, identity: Optional[SessionIdentity], property_id: str) -> PropertyDeleteResult:
        if identity is None:
            return PropertyDeleteResult(success=False, error="You must be signed in to delete a property")

        pid = _parse_property_id(property_id)
        if pid is None:
            return PropertyDeleteResult(success=False, error="Property not found")

        try:
            async with self.unit_of_work:
                listing = await self.unit_of_work.properties.get_by_id(pid)
                if listing is None:
                    return PropertyDeleteResult(success=False, error="Property not found")
                if not _can_manage(identity, listing):
                    logger.warning("User %s tried to delete property %s", identity.id, property_id)
                    return PropertyDeleteResult(success=False, error="You can only delete your own properties")
                await self.unit_of_work.properties.delete(pid)
                await self.unit_of_work.commit()
        except Exception:
            logger.exception("Failed to delete property %s", property_id)
            return PropertyDeleteResult(success=False, error="Failed to delete property")

        logger.info("Property %s deleted by user %s", property_id, identity.id)
        await self.invalidator.revalidate(*PROPERTY_PATHS)
        return PropertyDeleteResult(success=True)

    async def toggle_featured_property(
        self,
        identity: Optional[SessionIdentity],
        property_id: str,
    ) -> Optional[PropertyDto]:
        """Flip the featured flag. Admin only; None when refused or missing."""
        if identity is None or not identity.isadmin:
            logger.warning("Non-admin attempted to feature property %s", property_id)
            return None

        pid = _parse_property_id(property_id)
        if pid is None:
            return None

        try:
            async with self.unit_of_work:
                listing = await self.unit_of_work.properties.get_by_id(pid)
                if listing is None:
                    return None
                listing.toggle_featured()
                await self.unit_of_work.properties.update(listing)
                await self.unit_of_work.commit()
        except Exception:
            logger.exception("Failed to toggle featured flag on property %s", property_id)
            return None

        await self.invalidator.revalidate(*PROPERTY_PATHS)
        return PropertyDto.from_entity(listing)
