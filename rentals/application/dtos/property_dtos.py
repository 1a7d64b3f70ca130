"""Property DTOs for API layer"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from ...domain.entities.property import Property


class LocationDto(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None


class RatesDto(BaseModel):
    nightly: Optional[float] = None
    weekly: Optional[float] = None
    monthly: Optional[float] = None


class SellerInfoDto(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class PropertyDto(BaseModel):
    id: str
    owner: str
    name: str
    type: str
    description: Optional[str] = None
    location: LocationDto
    beds: int
    baths: int
    square_feet: int
    amenities: List[str] = []
    rates: RatesDto
    seller_info: SellerInfoDto
    images: List[str] = []
    is_featured: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, listing: Property) -> "PropertyDto":
        return cls(
            id=str(listing.id),
            owner=str(listing.owner_id),
            name=listing.name,
            type=listing.type.value,
            description=listing.description,
            location=LocationDto(**listing.location.as_dict()),
            beds=listing.beds,
            baths=listing.baths,
            square_feet=listing.square_feet,
            amenities=list(listing.amenities),
            rates=RatesDto(**listing.rates.as_dict()),
            seller_info=SellerInfoDto(**listing.seller_info.as_dict()),
            images=list(listing.images),
            is_featured=listing.is_featured,
            created_at=listing.created_at,
            updated_at=listing.updated_at,
        )


class PropertyListResult(BaseModel):
    properties: List[PropertyDto]
    total: int


class PropertyDeleteResult(BaseModel):
    success: bool
    error: Optional[str] = None
