from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.api.deps import get_current_user_id, get_db
from aqar.repositories import preferences
from aqar.schemas.preferences import PreferencesUpdate, SearchHistoryEntry

router = APIRouter()


@router.get("/{user_id}")
async def get_preferences(user_id: str, db: AsyncSession = Depends(get_db)) -> dict | None:
    """Stored preferences, or null when the user has none yet."""
    return await preferences.get_preferences(db, user_id)


@router.put("")
async def update_preferences(
    payload: PreferencesUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> dict | None:
    await preferences.update_preferences(db, user_id, payload)
    return await preferences.get_preferences(db, user_id)


@router.post("/search-history", status_code=204)
async def add_search_history(
    payload: SearchHistoryEntry,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> None:
    await preferences.add_search_history(db, user_id, payload.search_term)
