"""User DTOs for API layer"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ...core.exceptions import AuthFailure
from ...domain.entities.user import User
from ...domain.value_objects.session import SessionIdentity
from .results import ActionResult


class UserDto(BaseModel):
    """DTO for user response; never carries the password digest"""
    id: str
    first_name: str
    last_name: str
    name: str
    email: str
    isadmin: bool
    isactive: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserDto":
        return cls(
            id=str(user.id),
            first_name=user.first_name,
            last_name=user.last_name,
            name=user.name,
            email=str(user.email),
            isadmin=user.isadmin,
            isactive=user.isactive,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class SessionDto(BaseModel):
    """Identity carried by the session token"""
    id: str
    name: str
    isadmin: bool
    expires_at: Optional[datetime] = None

    @classmethod
    def from_identity(cls, identity: SessionIdentity) -> "SessionDto":
        return cls(
            id=identity.id,
            name=identity.name,
            isadmin=identity.isadmin,
            expires_at=identity.expires_at,
        )


class SignInResult(ActionResult):
    """Sign-in outcome.

    ``reason`` and ``token`` stay on the server: the route puts the token in a
    cookie and excludes both from the response body.
    """
    identity: Optional[SessionDto] = None
    token: Optional[str] = Field(default=None, exclude=True)
    reason: Optional[AuthFailure] = Field(default=None, exclude=True)


class UserListResult(BaseModel):
    records: List[UserDto]
    total_pages: int


class EmailAvailability(BaseModel):
    available: bool
    message: str


class SocialSignInResult(BaseModel):
    url: Optional[str] = None
    error: Optional[str] = None
