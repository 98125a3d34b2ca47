"""AI gateway result schemas"""

from dataclasses import dataclass, field
from typing import Any

from aqar.models.property import OfferType, PropertyType


@dataclass(frozen=True)
class SearchParams:
    """Structured search fields extracted from a free-text query."""

    type: OfferType | None = None
    property_type: PropertyType | None = None
    city: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    bedrooms: int | None = None
    features: list[str] | None = None


@dataclass(frozen=True)
class Parsed:
    params: SearchParams


@dataclass(frozen=True)
class Fallback:
    reason: str


SearchOutcome = Parsed | Fallback


@dataclass(frozen=True)
class Recommendation:
    property_index: int  # 0-based into the candidate listings
    reason: str
    property: dict[str, Any] | None = None


@dataclass(frozen=True)
class TypeBreakdown:
    type: str
    count: int
    average_price: float


@dataclass(frozen=True)
class MarketReport:
    analysis: str
    average_price: float = 0
    total_listings: int = 0
    price_range: dict[str, float] | None = None
    type_breakdown: list[TypeBreakdown] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ChatMessage:
    message: str


@dataclass(frozen=True)
class SmartSearchQuery:
    query: str


@dataclass(frozen=True)
class MarketRequest:
    city: str
    property_type: str | None = None
