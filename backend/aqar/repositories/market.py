"""Market analysis log"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.models.market import MarketAnalysis


async def save_analysis(
    db: AsyncSession,
    *,
    city: str,
    area: str,
    property_type: str,
    average_price: float,
    price_change: float,
    total_listings: int,
    ai_insights: str,
) -> str:
    """Append a new analysis row; earlier rows are never updated."""
    row = MarketAnalysis(
        city=city,
        area=area,
        property_type=property_type,
        average_price=average_price,
        price_change=price_change,
        total_listings=total_listings,
        ai_insights=ai_insights,
    )
    db.add(row)
    await db.commit()
    return row.id


async def get_latest_analysis(
    db: AsyncSession,
    city: str,
    property_type: str | None = None,
) -> dict | None:
    query = select(MarketAnalysis).where(MarketAnalysis.city == city)
    if property_type:
        query = query.where(MarketAnalysis.property_type == property_type)
    query = query.order_by(MarketAnalysis.analysis_date.desc()).limit(1)

    result = await db.execute(query)
    row = result.scalar_one_or_none()
    return row.to_dict() if row else None
