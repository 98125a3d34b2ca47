"""Listing payload and filter schemas"""

from dataclasses import dataclass, field

from aqar.models.property import OfferType, PropertyType


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class Location:
    city: str
    area: str = ""
    address: str = ""
    coordinates: Coordinates | None = None


@dataclass(frozen=True)
class Features:
    bedrooms: int = 0
    bathrooms: int = 0
    area: float = 0.0  # square meters
    parking: bool = False
    furnished: bool = False
    balcony: bool = False
    garden: bool = False
    pool: bool = False
    gym: bool = False
    security: bool = False


@dataclass(frozen=True)
class ContactInfo:
    phone: str
    email: str
    whatsapp: str | None = None


@dataclass(frozen=True)
class PropertyCreate:
    title: str
    description: str
    price: float
    type: OfferType
    property_type: PropertyType
    location: Location
    features: Features = field(default_factory=Features)
    images: list[str] = field(default_factory=list)
    contact_info: ContactInfo = field(default_factory=lambda: ContactInfo(phone="", email=""))


@dataclass(frozen=True)
class ListingFilters:
    """Conjunctive listing filters. ``None`` means "don't filter"."""

    offer_type: OfferType | None = None
    property_type: PropertyType | None = None
    city: str | None = None  # case-insensitive substring
    min_price: float | None = None
    max_price: float | None = None
    featured: bool | None = None  # only True narrows the result
