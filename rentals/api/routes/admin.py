"""Admin user management routes"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ...application.dtos.user_dtos import UserDto, UserListResult
from ...application.use_cases.manage_users import (
    USERS_PATH,
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    SetUserActiveUseCase,
    UpdateUserUseCase,
)
from ...core.config import settings
from ...core.exceptions import NotFoundError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.session import SessionIdentity
from ..dependencies import get_broadcaster, get_current_admin, get_unit_of_work
from ..event_broadcaster import InvalidationBroadcaster
from ..forms import read_fields
from ..responses import apply_status

router = APIRouter()

USER_CHECKBOXES = ("isadmin",)
UPDATE_CHECKBOXES = ("isadmin", "isactive")


@router.get("/users", response_model=UserListResult)
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    query: Optional[str] = None,
    admin: SessionIdentity = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """List users, newest first, optionally filtered"""
    return await ListUsersUseCase(unit_of_work).execute(admin, page, page_size, query)


@router.get("/users/{user_id}", response_model=UserDto)
async def get_user(
    user_id: str,
    admin: SessionIdentity = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Get a single user"""
    try:
        return await GetUserUseCase(unit_of_work).execute(admin, user_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.post("/users")
async def create_user(
    request: Request,
    response: Response,
    admin: SessionIdentity = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    invalidator: InvalidationBroadcaster = Depends(get_broadcaster),
):
    """Create a user with a chosen admin flag"""
    fields = await read_fields(request, checkboxes=USER_CHECKBOXES)
    result = await CreateUserUseCase(unit_of_work, invalidator).execute(admin, fields)
    return apply_status(response, result, status.HTTP_201_CREATED)


@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    request: Request,
    response: Response,
    admin: SessionIdentity = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    invalidator: InvalidationBroadcaster = Depends(get_broadcaster),
):
    """Update a user; a blank password keeps the current one"""
    fields = await read_fields(request, checkboxes=UPDATE_CHECKBOXES)
    result = await UpdateUserUseCase(unit_of_work, invalidator).execute(admin, user_id, fields)
    return apply_status(response, result)


@router.put("/users/{user_id}/status")
async def set_user_status(
    user_id: str,
    request: Request,
    response: Response,
    admin: SessionIdentity = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    invalidator: InvalidationBroadcaster = Depends(get_broadcaster),
):
    """Activate or deactivate a user"""
    fields = await read_fields(request, checkboxes=("isactive",))
    result = await SetUserActiveUseCase(unit_of_work, invalidator).execute(admin, user_id, fields)
    return apply_status(response, result)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    admin: SessionIdentity = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    invalidator: InvalidationBroadcaster = Depends(get_broadcaster),
):
    """Delete a user and their listings, then point the caller at the user list"""
    await DeleteUserUseCase(unit_of_work, invalidator).execute(admin, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers={"Location": USERS_PATH})
