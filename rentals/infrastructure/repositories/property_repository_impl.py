"""Property repository implementation"""

from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError, PersistenceError
from ...domain.entities.property import Property
from ...domain.enums import PropertyType
from ...domain.repositories.property_repository import IPropertyRepository
from ...domain.value_objects.entity_ids import PropertyId, UserId
from ...domain.value_objects.property_details import Location, Rates, SellerInfo
from ..orm.property_model import PropertyModel

ALL_TYPES = "all"


class PropertyRepositoryImpl(IPropertyRepository):
    """Repository implementation for Property listings"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, property_id: PropertyId) -> Optional[Property]:
        model = await self._get_model(property_id)
        return self._map_to_entity(model) if model else None

    async def list(self, page: Optional[int] = None, page_size: Optional[int] = None) -> Tuple[List[Property], int]:
        """Newest first; the whole collection when no page is given"""
        stmt = self._newest_first(select(PropertyModel))
        if page is not None and page_size:
            stmt = stmt.offset((page - 1) * page_size).limit(page_size)
        try:
            total = (await self.session.execute(select(func.count()).select_from(PropertyModel))).scalar_one()
            models = (await self.session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to list properties") from e
        return [self._map_to_entity(model) for model in models], total

    async def list_featured(self, limit: int) -> List[Property]:
        stmt = self._newest_first(select(PropertyModel).where(PropertyModel.is_featured.is_(True))).limit(limit)
        return await self._fetch(stmt)

    async def list_by_owner(self, owner_id: UserId) -> List[Property]:
        stmt = self._newest_first(select(PropertyModel).where(PropertyModel.owner_id == owner_id.value))
        return await self._fetch(stmt)

    async def search(self, location: Optional[str], property_type: Optional[str]) -> List[Property]:
        stmt = select(PropertyModel)

        term = (location or "").strip().lower()
        if term:
            stmt = stmt.where(or_(
                func.lower(PropertyModel.location_street).contains(term, autoescape=True),
                func.lower(PropertyModel.location_city).contains(term, autoescape=True),
                func.lower(PropertyModel.location_state).contains(term, autoescape=True),
                func.lower(PropertyModel.location_zipcode).contains(term, autoescape=True),
            ))

        if property_type and property_type.strip().lower() != ALL_TYPES:
            stmt = stmt.where(PropertyModel.type == property_type.strip())

        return await self._fetch(self._newest_first(stmt))

    async def add(self, listing: Property) -> Property:
        self.session.add(self._create_model_from_entity(listing))
        await self._flush()
        return listing

    async def update(self, listing: Property) -> Property:
        model = await self._get_model(listing.id)
        if model is None:
            raise NotFoundError("Property", str(listing.id))
        self._update_model_from_entity(model, listing)
        await self._flush()
        return listing

    async def delete(self, property_id: PropertyId) -> bool:
        try:
            result = await self.session.execute(delete(PropertyModel).where(PropertyModel.id == property_id.value))
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to delete property") from e
        return result.rowcount > 0

    async def delete_by_owner(self, owner_id: UserId) -> int:
        try:
            result = await self.session.execute(delete(PropertyModel).where(PropertyModel.owner_id == owner_id.value))
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to delete properties") from e
        return result.rowcount

    @staticmethod
    def _newest_first(stmt):
        return stmt.order_by(PropertyModel.created_at.desc(), PropertyModel.id)

    async def _fetch(self, stmt) -> List[Property]:
        try:
            models = (await self.session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load properties") from e
        return [self._map_to_entity(model) for model in models]

    async def _get_model(self, property_id: PropertyId) -> Optional[PropertyModel]:
        try:
            return await self.session.get(PropertyModel, property_id.value)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load property") from e

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError("Failed to save property") from e

    def _create_model_from_entity(self, listing: Property) -> PropertyModel:
        model = PropertyModel(
            id=listing.id.value,
            owner_id=listing.owner_id.value,
            created_at=listing.created_at,
        )
        self._update_model_from_entity(model, listing)
        return model

    def _update_model_from_entity(self, model: PropertyModel, listing: Property) -> None:
        model.name = listing.name
        model.type = listing.type.value
        model.description = listing.description
        model.location_street = listing.location.street
        model.location_city = listing.location.city
        model.location_state = listing.location.state
        model.location_zipcode = listing.location.zipcode
        model.beds = listing.beds
        model.baths = listing.baths
        model.square_feet = listing.square_feet
        model.amenities = list(listing.amenities)
        model.rate_nightly = listing.rates.nightly
        model.rate_weekly = listing.rates.weekly
        model.rate_monthly = listing.rates.monthly
        model.seller_name = listing.seller_info.name
        model.seller_email = listing.seller_info.email
        model.seller_phone = listing.seller_info.phone
        model.images = list(listing.images)
        model.is_featured = listing.is_featured
        model.updated_at = listing.updated_at

    def _map_to_entity(self, model: PropertyModel) -> Property:
        return Property(
            id=PropertyId(model.id),
            owner_id=UserId(model.owner_id),
            name=model.name,
            type=PropertyType(model.type),
            description=model.description,
            location=Location(
                street=model.location_street,
                city=model.location_city,
                state=model.location_state,
                zipcode=model.location_zipcode,
            ),
            beds=model.beds,
            baths=model.baths,
            square_feet=model.square_feet,
            amenities=list(model.amenities or []),
            rates=Rates(
                nightly=model.rate_nightly,
                weekly=model.rate_weekly,
                monthly=model.rate_monthly,
            ),
            seller_info=SellerInfo(
                name=model.seller_name,
                email=model.seller_email,
                phone=model.seller_phone,
            ),
            images=list(model.images or []),
            is_featured=model.is_featured,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
