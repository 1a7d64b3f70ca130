"""API dependencies"""

import logging
from functools import lru_cache
from typing import Optional, Tuple

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.security import issue_session_token, read_session_token
from ..db.database import get_db
from ..domain.repositories.unit_of_work import IUnitOfWork
from ..domain.value_objects.session import SessionIdentity
from ..infrastructure.external_services.identity_providers import (
    IdentityProviderRegistry,
    build_default_registry,
)
from ..infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl
from .event_broadcaster import InvalidationBroadcaster, broadcaster

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def read_request_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Tuple[Optional[SessionIdentity], bool]:
    """Identity asserted by the session cookie or a Bearer token.

    Returns the identity (None when absent or invalid) and whether it came
    from the cookie.
    """
    cookie_token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    token = cookie_token or (credentials.credentials if credentials else None)
    if not token:
        return None, False

    identity = read_session_token(token)
    if identity is None:
        logger.debug("Ignoring invalid or expired session token")
    return identity, bool(cookie_token)


async def get_optional_session(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[SessionIdentity]:
    """Current identity, if any. A cookie session is re-issued with a fresh expiry."""
    identity, from_cookie = read_request_session(request, credentials)
    if identity is not None and from_cookie:
        set_session_cookie(response, issue_session_token(identity))
    return identity


async def get_current_session(
    identity: Optional[SessionIdentity] = Depends(get_optional_session),
) -> SessionIdentity:
    """Get current authenticated identity"""
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


async def get_current_admin(identity: SessionIdentity = Depends(get_current_session)) -> SessionIdentity:
    """Get current admin identity"""
    if not identity.isadmin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return identity


def get_unit_of_work(db: AsyncSession = Depends(get_db)) -> IUnitOfWork:
    """Get unit of work"""
    return UnitOfWorkImpl(db)


def get_broadcaster() -> InvalidationBroadcaster:
    return broadcaster


@lru_cache()
def get_identity_providers() -> IdentityProviderRegistry:
    """Get identity provider registry"""
    return build_default_registry(settings)
