"""Review endpoints, nested under /properties/{property_id}."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.api.deps import get_current_user_id, get_db
from aqar.repositories import reviews
from aqar.schemas.review import ReviewCreate

router = APIRouter()


@router.get("/{property_id}/reviews")
async def list_reviews(property_id: str, db: AsyncSession = Depends(get_db)) -> list[dict]:
    return await reviews.list_reviews(db, property_id)


@router.get("/{property_id}/reviews/stats")
async def get_review_stats(property_id: str, db: AsyncSession = Depends(get_db)) -> dict:
    return asdict(await reviews.get_review_stats(db, property_id))


@router.post("/{property_id}/reviews", status_code=201)
async def create_review(
    property_id: str,
    payload: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> dict:
    review_id = await reviews.create_review(db, user_id, property_id, payload.rating, payload.comment)
    return {"id": review_id}
