"""Property value objects"""

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass(frozen=True)
class Location:
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Rates:
    nightly: Optional[float] = None
    weekly: Optional[float] = None
    monthly: Optional[float] = None

    def __post_init__(self):
        for name in ("nightly", "weekly", "monthly"):
            amount = getattr(self, name)
            if amount is not None and amount < 0:
                raise ValueError(f"{name.capitalize()} rate cannot be negative")

    @property
    def is_empty(self) -> bool:
        return self.nightly is None and self.weekly is None and self.monthly is None

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SellerInfo:
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    def as_dict(self) -> dict:
        return asdict(self)
