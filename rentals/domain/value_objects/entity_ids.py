"""Entity ID value objects"""

from dataclasses import dataclass
from typing import Type, TypeVar
from uuid import UUID, uuid4

IdT = TypeVar("IdT", bound="EntityId")


@dataclass(frozen=True)
class EntityId:
    """UUID-backed identifier; subclasses only differ by type"""
    value: UUID

    def __post_init__(self):
        if not isinstance(self.value, UUID):
            raise ValueError(f"{type(self).__name__} must wrap a UUID")

    @classmethod
    def generate(cls: Type[IdT]) -> IdT:
        return cls(uuid4())

    @classmethod
    def from_str(cls: Type[IdT], raw: str) -> IdT:
        """Parse the canonical string form. Raises ValueError on malformed input."""
        return cls(UUID(str(raw)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId(EntityId):
    pass


@dataclass(frozen=True)
class PropertyId(EntityId):
    pass
