"""Property listing routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ...application.dtos.property_dtos import PropertyDeleteResult, PropertyDto, PropertyListResult
from ...application.use_cases.property_use_cases import PropertyUseCases
from ...core.config import settings
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.session import SessionIdentity
from ..dependencies import get_broadcaster, get_current_admin, get_current_session, get_unit_of_work
from ..event_broadcaster import InvalidationBroadcaster
from ..forms import read_fields
from ..responses import apply_status

router = APIRouter()

LIST_FIELDS = ("amenities", "images")


def get_property_use_cases(
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    invalidator: InvalidationBroadcaster = Depends(get_broadcaster),
) -> PropertyUseCases:
    return PropertyUseCases(unit_of_work, invalidator)


@router.get("", response_model=PropertyListResult)
async def list_properties(
    page: Optional[int] = Query(None, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    location: Optional[str] = None,
    property_type: Optional[str] = Query(None, alias="type"),
    properties: PropertyUseCases = Depends(get_property_use_cases),
):
    """List properties newest first; ``location`` or ``type`` switches to search"""
    if location is not None or property_type is not None:
        found = await properties.search_properties(location, property_type)
        return PropertyListResult(properties=found, total=len(found))
    return await properties.fetch_properties(page, page_size if page is not None else None)


@router.get("/featured", response_model=List[PropertyDto])
async def featured_properties(properties: PropertyUseCases = Depends(get_property_use_cases)):
    return await properties.fetch_featured_properties()


@router.get("/owner/{owner_id}", response_model=List[PropertyDto])
async def properties_by_owner(owner_id: str, properties: PropertyUseCases = Depends(get_property_use_cases)):
    return await properties.fetch_properties_by_owner(owner_id)


@router.get("/{property_id}", response_model=PropertyDto)
async def get_property(property_id: str, properties: PropertyUseCases = Depends(get_property_use_cases)):
    listing = await properties.fetch_property_by_id(property_id)
    if listing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return listing


@router.post("")
async def add_property(
    request: Request,
    response: Response,
    identity: SessionIdentity = Depends(get_current_session),
    properties: PropertyUseCases = Depends(get_property_use_cases),
):
    """Create a listing owned by the signed-in user"""
    fields = await read_fields(request, lists=LIST_FIELDS)
    result = await properties.add_property(identity, fields)
    return apply_status(response, result, status.HTTP_201_CREATED)


@router.put("/{property_id}")
async def update_property(
    property_id: str,
    request: Request,
    response: Response,
    identity: SessionIdentity = Depends(get_current_session),
    properties: PropertyUseCases = Depends(get_property_use_cases),
):
    """Edit a listing; owner or admin only"""
    fields = await read_fields(request, lists=LIST_FIELDS)
    result = await properties.update_property(identity, property_id, fields)
    return apply_status(response, result)


@router.delete("/{property_id}", response_model=PropertyDeleteResult)
async def delete_property(
    property_id: str,
    response: Response,
    identity: SessionIdentity = Depends(get_current_session),
    properties: PropertyUseCases = Depends(get_property_use_cases),
):
    result = await properties.delete_property(identity, property_id)
    if not result.success:
        response.status_code = (
            status.HTTP_404_NOT_FOUND if result.error == "Property not found" else status.HTTP_403_FORBIDDEN
        )
    return result


@router.post("/{property_id}/featured", response_model=PropertyDto)
async def toggle_featured(
    property_id: str,
    admin: SessionIdentity = Depends(get_current_admin),
    properties: PropertyUseCases = Depends(get_property_use_cases),
):
    """Flip the featured flag of a listing"""
    listing = await properties.toggle_featured_property(admin, property_id)
    if listing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return listing
