"""Property repository interface"""

from abc import ABC, abstractmethod
from typing import Optional, List, Tuple

from ..entities.property import Property
from ..value_objects.entity_ids import PropertyId, UserId


class IPropertyRepository(ABC):

    @abstractmethod
    async def get_by_id(self, property_id: PropertyId) -> Optional[Property]:
        pass

    @abstractmethod
    async def list(self, page: Optional[int] = None, page_size: Optional[int] = None) -> Tuple[List[Property], int]:
        pass

    @abstractmethod
    async def list_featured(self, limit: int) -> List[Property]:
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: UserId) -> List[Property]:
        pass

    @abstractmethod
    async def search(self, location: Optional[str], property_type: Optional[str]) -> List[Property]:
        pass

    @abstractmethod
    async def add(self, listing: Property) -> Property:
        pass

    @abstractmethod
    async def update(self, listing: Property) -> Property:
        pass

    @abstractmethod
    async def delete(self, property_id: PropertyId) -> bool:
        pass

    @abstractmethod
    async def delete_by_owner(self, owner_id: UserId) -> int:
        pass
