"""User self-service routes"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ...application.dtos.user_dtos import EmailAvailability, UserDto
from ...application.use_cases.manage_users import CheckEmailAvailabilityUseCase
from ...application.use_cases.update_user_profile import GetProfileUseCase, UpdateProfileUseCase
from ...core.exceptions import NotFoundError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.session import SessionIdentity
from ..dependencies import get_broadcaster, get_current_session, get_unit_of_work, set_session_cookie
from ..event_broadcaster import InvalidationBroadcaster
from ..forms import read_fields
from ..responses import apply_status

router = APIRouter()


@router.get("/me", response_model=UserDto)
async def get_my_profile(
    identity: SessionIdentity = Depends(get_current_session),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Get current user profile"""
    try:
        return await GetProfileUseCase(unit_of_work).execute(identity)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.put("/me")
async def update_my_profile(
    request: Request,
    response: Response,
    identity: SessionIdentity = Depends(get_current_session),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    invalidator: InvalidationBroadcaster = Depends(get_broadcaster),
):
    """Change own first and last name"""
    fields = await read_fields(request)
    result = await UpdateProfileUseCase(unit_of_work, invalidator).execute(identity, fields)
    if result.success:
        # Session carries the display name
        set_session_cookie(response, result.token)
    return apply_status(response, result)


@router.get("/email-available", response_model=EmailAvailability)
async def check_email_available(
    email: str,
    exclude_id: Optional[str] = None,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Check whether an email address is free, ignoring one user"""
    return await CheckEmailAvailabilityUseCase(unit_of_work).execute(email, exclude_id)
