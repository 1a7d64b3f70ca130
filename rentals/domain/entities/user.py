"""User entity with business logic"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..value_objects.email import Email
from ..value_objects.entity_ids import UserId
from ..value_objects.session import SessionIdentity


def display_name(first_name: str, last_name: str) -> str:
    return f"{first_name} {last_name}".strip()


@dataclass
class User:
    id: UserId
    email: Email
    first_name: str
    last_name: str
    hashed_password: Optional[str] = None
    name: str = ""
    isadmin: bool = False
    isactive: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        if not self.name:
            self.name = display_name(self.first_name, self.last_name)

    @classmethod
    def create(
        cls,
        email: Email,
        first_name: str,
        last_name: str,
        hashed_password: Optional[str] = None,
        isadmin: bool = False,
    ) -> 'User':
        """Factory method to create a new user with proper defaults"""
        now = datetime.utcnow()
        return cls(
            id=UserId.generate(),
            email=email,
            first_name=first_name,
            last_name=last_name,
            hashed_password=hashed_password,
            isadmin=isadmin,
            isactive=True,
            created_at=now,
            updated_at=now,
        )

    def rename(self, first_name: str, last_name: str) -> None:
        """Business logic: change names, display name follows"""
        self.first_name = first_name
        self.last_name = last_name
        self.name = display_name(first_name, last_name)
        self.touch()

    def change_email(self, email: Email) -> bool:
        """Returns True when the address actually changed"""
        if email == self.email:
            return False
        self.email = email
        self.touch()
        return True

    def set_password_digest(self, hashed_password: str) -> None:
        self.hashed_password = hashed_password
        self.touch()

    def set_active(self, isactive: bool) -> None:
        self.isactive = isactive
        self.touch()

    def set_admin(self, isadmin: bool) -> None:
        self.isadmin = isadmin
        self.touch()

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()

    @property
    def has_password(self) -> bool:
        return bool(self.hashed_password)

    def to_identity(self) -> SessionIdentity:
        """Session identity derived from this user at sign-in"""
        return SessionIdentity(id=str(self.id), name=self.name, isadmin=self.isadmin)
