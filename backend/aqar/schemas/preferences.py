from dataclasses import dataclass, field

from aqar.models.property import OfferType


@dataclass(frozen=True)
class PriceRange:
    min: float = 0
    max: float = 1_000_000


@dataclass(frozen=True)
class PreferencesUpdate:
    preferred_type: OfferType | None = None
    preferred_property_types: list[str] = field(default_factory=list)
    preferred_cities: list[str] = field(default_factory=list)
    price_range: PriceRange = field(default_factory=PriceRange)
    preferred_features: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SearchHistoryEntry:
    search_term: str
