import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from aqar.database import Base
from aqar.models.property import _utcnow


class MarketAnalysis(Base):
    """Append-only log of AI market analyses; the newest row per (city, property_type) is current."""

    __tablename__ = "market_analyses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    city: Mapped[str] = mapped_column(String(100), index=True)
    area: Mapped[str] = mapped_column(String(100), index=True)
    property_type: Mapped[str] = mapped_column(String(20))
    average_price: Mapped[float] = mapped_column(Float)
    # no historical baseline yet, always 0
    price_change: Mapped[float] = mapped_column(Float, default=0.0)
    total_listings: Mapped[int] = mapped_column(Integer)
    analysis_date: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, index=True)
    ai_insights: Mapped[str] = mapped_column(Text)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "city": self.city,
            "area": self.area,
            "property_type": self.property_type,
            "average_price": self.average_price,
            "price_change": self.price_change,
            "total_listings": self.total_listings,
            "analysis_date": self.analysis_date.isoformat() if self.analysis_date else None,
            "ai_insights": self.ai_insights,
        }
