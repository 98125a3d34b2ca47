"""Assistant endpoints. None of them surface model failures to the caller."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.ai import gateway
from aqar.api.deps import get_current_user_id, get_db, require_user_id
from aqar.schemas.ai import ChatMessage, MarketRequest, SmartSearchQuery

router = APIRouter()


@router.post("/recommendations")
async def recommendations(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(require_user_id),
) -> list[dict]:
    recs = await gateway.get_property_recommendations(db, user_id)
    return [asdict(r) for r in recs]


@router.post("/market-analysis")
async def market_analysis(payload: MarketRequest, db: AsyncSession = Depends(get_db)) -> dict:
    report = await gateway.analyze_market(db, payload.city, payload.property_type)
    return asdict(report)


@router.post("/smart-search")
async def smart_search(payload: SmartSearchQuery, db: AsyncSession = Depends(get_db)) -> dict:
    return await gateway.smart_search(db, payload.query)


@router.post("/chat")
async def chat(
    payload: ChatMessage,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> dict:
    reply = await gateway.chat_with_ai(db, payload.message, user_id)
    return {"message": reply}
