"""Security utilities"""

import asyncio
import secrets
from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from .config import settings
from ..domain.value_objects.session import SessionIdentity


# Password context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def get_password_hash(password: str) -> str:
    """Hash password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognised digest
        return False


def dummy_verify() -> None:
    """Spend the same time as a real verification when there is no digest to check"""
    pwd_context.dummy_verify()


async def hash_password_async(password: str) -> str:
    """Hash in a worker thread so the event loop keeps serving requests"""
    return await asyncio.to_thread(get_password_hash, password)


async def verify_password_async(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        await asyncio.to_thread(dummy_verify)
        return False
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)


def create_session_token(
    user_id: str,
    name: str,
    isadmin: bool,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed session token.

    The token is signed, not encrypted: only the subject id, display name and
    admin flag go in it.
    """
    if expires_delta is None:
        expires_delta = timedelta(days=settings.SESSION_MAX_AGE_DAYS)
    now = datetime.utcnow()

    to_encode = {
        "sub": user_id,
        "name": name,
        "isadmin": bool(isadmin),
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def read_session_token(token: str) -> Optional[SessionIdentity]:
    """Verify token and return the identity it asserts"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    subject = payload.get("sub")
    if not subject:
        return None

    return SessionIdentity(
        id=str(subject),
        name=payload.get("name") or "",
        isadmin=payload.get("isadmin") is True,
        expires_at=datetime.utcfromtimestamp(payload["exp"]),
    )


def issue_session_token(identity: SessionIdentity) -> str:
    """Re-issue a token for an identity with a fresh expiry"""
    return create_session_token(identity.id, identity.name, identity.isadmin)


def generate_oauth_state() -> str:
    """Generate an unguessable OAuth state value."""
    return secrets.token_urlsafe(32)
