import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from aqar.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class OfferType(str, enum.Enum):
    SALE = "sale"
    RENT = "rent"


class PropertyType(str, enum.Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"
    OFFICE = "office"
    LAND = "land"


class PropertyStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SOLD = "sold"
    RENTED = "rented"


# 7 boolean amenities carried in Property.features
AMENITIES = ("parking", "furnished", "balcony", "garden", "pool", "gym", "security")


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    price: Mapped[float] = mapped_column(Float)
    offer_type: Mapped[OfferType] = mapped_column(Enum(OfferType), index=True)
    property_type: Mapped[PropertyType] = mapped_column(Enum(PropertyType), index=True)

    # location
    city: Mapped[str] = mapped_column(String(100), index=True)
    area: Mapped[str] = mapped_column(String(100), default="")
    address: Mapped[str] = mapped_column(String(300), default="")
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    # {bedrooms, bathrooms, area, parking, furnished, ...}
    features: Mapped[dict] = mapped_column(JSON, default=dict)
    # opaque storage ids
    images: Mapped[list] = mapped_column(JSON, default=list)
    # {phone, email, whatsapp?}
    contact_info: Mapped[dict] = mapped_column(JSON, default=dict)

    owner_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    status: Mapped[PropertyStatus] = mapped_column(
        Enum(PropertyStatus), default=PropertyStatus.PENDING, index=True
    )
    featured: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    views: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "type": self.offer_type.value,
            "property_type": self.property_type.value,
            "location": {
                "city": self.city,
                "area": self.area,
                "address": self.address,
                "coordinates": (
                    {"lat": self.latitude, "lng": self.longitude}
                    if self.latitude is not None and self.longitude is not None
                    else None
                ),
            },
            "features": dict(self.features or {}),
            "images": list(self.images or []),
            "owner_id": self.owner_id,
            "status": self.status.value,
            "featured": self.featured,
            "views": self.views,
            "contact_info": dict(self.contact_info or {}),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
