import uuid

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from aqar.database import Base

SEARCH_HISTORY_LIMIT = 10
DEFAULT_PRICE_RANGE = {"min": 0, "max": 1_000_000}


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), unique=True, index=True)
    preferred_type: Mapped[str | None] = mapped_column(String(10), nullable=True)
    preferred_property_types: Mapped[list] = mapped_column(JSON, default=list)
    preferred_cities: Mapped[list] = mapped_column(JSON, default=list)
    price_range: Mapped[dict] = mapped_column(JSON, default=lambda: dict(DEFAULT_PRICE_RANGE))
    preferred_features: Mapped[list] = mapped_column(JSON, default=list)
    # newest first, capped at SEARCH_HISTORY_LIMIT
    search_history: Mapped[list] = mapped_column(JSON, default=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "preferred_type": self.preferred_type,
            "preferred_property_types": list(self.preferred_property_types or []),
            "preferred_cities": list(self.preferred_cities or []),
            "price_range": dict(self.price_range or DEFAULT_PRICE_RANGE),
            "preferred_features": list(self.preferred_features or []),
            "search_history": list(self.search_history or []),
        }
