"""Authenticated session identity"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class SessionIdentity:
    """Who a session token speaks for.

    Derived from the user at sign-in and carried inside the signed token.
    Holds nothing that must stay secret from the token holder.
    """
    id: str
    name: str
    isadmin: bool = False
    expires_at: Optional[datetime] = None
