"""Property listing entity"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..enums import PropertyType
from ..value_objects.entity_ids import PropertyId, UserId
from ..value_objects.property_details import Location, Rates, SellerInfo


@dataclass
class Property:
    id: PropertyId
    owner_id: UserId
    name: str
    type: PropertyType
    location: Location
    beds: int
    baths: int
    square_feet: int
    rates: Rates
    description: Optional[str] = None
    amenities: List[str] = field(default_factory=list)
    seller_info: SellerInfo = field(default_factory=SellerInfo)
    images: List[str] = field(default_factory=list)
    is_featured: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def create(cls, owner_id: UserId, **fields) -> 'Property':
        now = datetime.utcnow()
        return cls(id=PropertyId.generate(), owner_id=owner_id, created_at=now, updated_at=now, **fields)

    def is_owned_by(self, user_id: str) -> bool:
        return str(self.owner_id) == str(user_id)

    def toggle_featured(self) -> bool:
        self.is_featured = not self.is_featured
        self.updated_at = datetime.utcnow()
        return self.is_featured

    def apply(self, **fields) -> None:
        """Overwrite listing details; ownership and flags are not editable here"""
        for key, value in fields.items():
            if key in ("id", "owner_id", "is_featured", "created_at", "updated_at"):
                raise ValueError(f"{key} cannot be changed")
            setattr(self, key, value)
        self.updated_at = datetime.utcnow()
