"""User repository interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, List

from ..entities.user import User
from ..value_objects.email import Email
from ..value_objects.entity_ids import UserId


@dataclass
class UserPage:
    records: List[User]
    total_pages: int
    total: int = 0


class IUserRepository(ABC):

    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: Email) -> Optional[User]:
        pass

    @abstractmethod
    async def exists_by_email(self, email: Email, exclude_id: Optional[UserId] = None) -> bool:
        pass

    @abstractmethod
    async def add(self, user: User) -> User:
        """Insert a new user. Raises DuplicateEmailError on a taken email."""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Persist changes. Raises NotFoundError or DuplicateEmailError."""
        pass

    @abstractmethod
    async def set_active(self, user_id: UserId, isactive: bool) -> Optional[User]:
        pass

    @abstractmethod
    async def delete(self, user_id: UserId) -> bool:
        pass

    @abstractmethod
    async def list(self, query: Optional[str], page: int, page_size: int) -> UserPage:
        pass
