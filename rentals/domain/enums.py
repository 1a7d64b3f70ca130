"""
Domain Enums - Business domain enumerations
"""

from enum import Enum


class PropertyType(str, Enum):
    APARTMENT = "Apartment"
    CONDO = "Condo"
    HOUSE = "House"
    CABIN_OR_COTTAGE = "Cabin Or Cottage"
    ROOM = "Room"
    STUDIO = "Studio"
    OTHER = "Other"


class IdentityProviderName(str, Enum):
    GOOGLE = "google"
    GITHUB = "github"
