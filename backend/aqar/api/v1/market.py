from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.api.deps import get_db
from aqar.repositories import market

router = APIRouter()


@router.get("/analysis")
async def get_analysis(
    city: str = Query(..., min_length=1),
    property_type: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> dict | None:
    """Most recent stored analysis for the city (and property type), or null."""
    return await market.get_latest_analysis(db, city, property_type)
