"""User preference repository"""

from __future__ import annotations

import logging
from dataclasses import asdict

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.errors import AuthorizationError
from aqar.models.preferences import DEFAULT_PRICE_RANGE, SEARCH_HISTORY_LIMIT, UserPreferences
from aqar.schemas.preferences import PreferencesUpdate

logger = logging.getLogger(__name__)


async def _find(db: AsyncSession, user_id: str) -> UserPreferences | None:
    result = await db.execute(select(UserPreferences).where(UserPreferences.user_id == user_id))
    return result.scalar_one_or_none()


async def get_preferences(db: AsyncSession, user_id: str) -> dict | None:
    """Preferences for ``user_id``, or None when the user never set any."""
    prefs = await _find(db, user_id)
    return prefs.to_dict() if prefs else None


async def update_preferences(db: AsyncSession, user_id: str | None, payload: PreferencesUpdate) -> None:
    """Upsert the caller's preferences. Search history is never touched here."""
    if not user_id:
        raise AuthorizationError("Must be logged in")

    values = {
        "preferred_type": payload.preferred_type.value if payload.preferred_type else None,
        "preferred_property_types": list(payload.preferred_property_types),
        "preferred_cities": list(payload.preferred_cities),
        "price_range": asdict(payload.price_range),
        "preferred_features": list(payload.preferred_features),
    }

    prefs = await _find(db, user_id)
    if prefs is None:
        db.add(UserPreferences(user_id=user_id, search_history=[], **values))
        logger.debug("created preferences for %s", user_id)
    else:
        for key, value in values.items():
            setattr(prefs, key, value)
        logger.debug("updated preferences for %s", user_id)
    await db.commit()


async def add_search_history(db: AsyncSession, user_id: str | None, term: str) -> None:
    """Record a search term, newest first, keeping the last 10. Anonymous callers are ignored."""
    if not user_id:
        return

    prefs = await _find(db, user_id)
    if prefs is None:
        db.add(
            UserPreferences(
                user_id=user_id,
                preferred_property_types=[],
                preferred_cities=[],
                price_range=dict(DEFAULT_PRICE_RANGE),
                preferred_features=[],
                search_history=[term],
            )
        )
        try:
            await db.commit()
            return
        except IntegrityError:
            # a concurrent first search created the record; fall through to update it
            await db.rollback()
            logger.debug("preferences for %s created concurrently", user_id)
            prefs = await _find(db, user_id)
            if prefs is None:
                raise

    # reassign: in-place JSON mutation is not tracked
    prefs.search_history = [term, *(prefs.search_history or [])][:SEARCH_HISTORY_LIMIT]
    await db.commit()
