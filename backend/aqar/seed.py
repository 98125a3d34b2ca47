"""Sample Bahraini listings for empty development databases"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.errors import AuthorizationError
from aqar.models.property import AMENITIES, OfferType, Property, PropertyStatus, PropertyType

logger = logging.getLogger(__name__)


def _features(bedrooms: int, bathrooms: int, area: float, *amenities: str) -> dict:
    features: dict = {"bedrooms": bedrooms, "bathrooms": bathrooms, "area": area}
    features.update({name: name in amenities for name in AMENITIES})
    return features


SAMPLE_PROPERTIES: list[dict] = [
    {
        "title": "شقة فاخرة في المنامة",
        "description": "شقة حديثة مع إطلالة رائعة على البحر، تحتوي على جميع وسائل الراحة الحديثة",
        "price": 85000,
        "offer_type": OfferType.SALE,
        "property_type": PropertyType.APARTMENT,
        "city": "المنامة",
        "area": "الجفير",
        "address": "شارع الملك فيصل، المنامة",
        "features": _features(2, 2, 120, "parking", "furnished", "balcony", "pool", "gym", "security"),
        "featured": True,
        "views": 45,
        "contact_info": {"phone": "+973 1234 5678", "email": "owner@example.com", "whatsapp": "+973 1234 5678"},
    },
    {
        "title": "فيلا عائلية في الرفاع",
        "description": "فيلا واسعة مع حديقة كبيرة، مثالية للعائلات الكبيرة",
        "price": 2500,
        "offer_type": OfferType.RENT,
        "property_type": PropertyType.VILLA,
        "city": "الرفاع",
        "area": "الرفاع الشرقي",
        "address": "شارع الأمير سلمان، الرفاع",
        "features": _features(4, 3, 300, "parking", "balcony", "garden", "pool", "security"),
        "featured": True,
        "views": 32,
        "contact_info": {"phone": "+973 2345 6789", "email": "villa@example.com"},
    },
    {
        "title": "مكتب تجاري في المحرق",
        "description": "مكتب حديث في موقع استراتيجي قريب من المطار",
        "price": 45000,
        "offer_type": OfferType.SALE,
        "property_type": PropertyType.OFFICE,
        "city": "المحرق",
        "area": "المحرق الجديدة",
        "address": "شارع الشيخ عيسى، المحرق",
        "features": _features(0, 2, 80, "parking", "furnished", "security"),
        "featured": False,
        "views": 18,
        "contact_info": {"phone": "+973 3456 7890", "email": "office@example.com"},
    },
    {
        "title": "منزل عائلي في مدينة عيسى",
        "description": "منزل مريح في حي هادئ، مناسب للعائلات",
        "price": 1800,
        "offer_type": OfferType.RENT,
        "property_type": PropertyType.HOUSE,
        "city": "مدينة عيسى",
        "area": "مدينة عيسى الجنوبية",
        "address": "شارع 42، مدينة عيسى",
        "features": _features(3, 2, 180, "parking", "garden"),
        "featured": False,
        "views": 28,
        "contact_info": {"phone": "+973 4567 8901", "email": "house@example.com"},
    },
    {
        "title": "أرض للبيع في سترة",
        "description": "قطعة أرض في موقع ممتاز للاستثمار أو البناء",
        "price": 120000,
        "offer_type": OfferType.SALE,
        "property_type": PropertyType.LAND,
        "city": "سترة",
        "area": "سترة الشمالية",
        "address": "منطقة 15، سترة",
        "features": _features(0, 0, 500),
        "featured": False,
        "views": 12,
        "contact_info": {"phone": "+973 5678 9012", "email": "land@example.com"},
    },
]


async def seed_sample_data(db: AsyncSession, user_id: str | None) -> dict:
    """Insert the sample listings (already approved) unless any listing exists."""
    if not user_id:
        raise AuthorizationError("Must be logged in to seed data")

    existing = await db.execute(select(Property.id).limit(1))
    if existing.first() is not None:
        return {"message": "Sample data already exists", "count": 0, "ids": []}

    props = [
        Property(**sample, images=[], owner_id=user_id, status=PropertyStatus.APPROVED)
        for sample in SAMPLE_PROPERTIES
    ]
    db.add_all(props)
    await db.commit()

    logger.info("seeded %d sample properties for %s", len(props), user_id)
    return {"message": "Sample data seeded successfully", "count": len(props), "ids": [p.id for p in props]}
