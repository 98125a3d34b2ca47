"""Listing repository: property queries, favorites and view counts."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import asdict

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.errors import AuthorizationError, InvalidInputError
from aqar.models.favorite import Favorite
from aqar.models.property import Property, PropertyStatus
from aqar.models.user import User
from aqar.schemas.property import ListingFilters, PropertyCreate
from aqar.storage import image_storage

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 20
DEFAULT_SEARCH_LIMIT = 10

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _with_image_urls(prop: Property, max_images: int | None = None) -> dict:
    """Serialize a listing and resolve its image ids (all, or the first ``max_images``)."""
    data = prop.to_dict()
    ids = data["images"] if max_images is None else data["images"][:max_images]
    data["image_urls"] = await image_storage.resolve_many(ids)
    return data


async def _enrich(props: list[Property], max_images: int | None = None) -> list[dict]:
    return list(await asyncio.gather(*(_with_image_urls(p, max_images) for p in props)))


def _tokenize(text: str) -> list[str]:
    seen: list[str] = []
    for token in _TOKEN_RE.findall(text.lower()):
        if token not in seen:
            seen.append(token)
    return seen


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def list_properties(
    db: AsyncSession,
    filters: ListingFilters | None = None,
    limit: int = DEFAULT_LIST_LIMIT,
) -> list[dict]:
    """Approved listings matching every given filter, featured first then newest first.

    Only the first ``limit`` rows are ever returned; there is no cursor.
    """
    filters = filters or ListingFilters()
    if limit <= 0:
        return []

    query = select(Property).where(Property.status == PropertyStatus.APPROVED)

    if filters.offer_type:
        query = query.where(Property.offer_type == filters.offer_type)
    if filters.property_type:
        query = query.where(Property.property_type == filters.property_type)
    if filters.min_price is not None:
        query = query.where(Property.price >= filters.min_price)
    if filters.max_price is not None:
        query = query.where(Property.price <= filters.max_price)
    if filters.featured:
        query = query.where(Property.featured.is_(True))

    query = query.order_by(Property.featured.desc(), Property.created_at.desc())

    if not filters.city:
        result = await db.execute(query.limit(limit))
        props = list(result.scalars().all())
    else:
        # SQLite lower() folds ASCII only, so the city match runs here
        needle = filters.city.lower()
        result = await db.execute(query)
        props = [p for p in result.scalars() if needle in p.city.lower()][:limit]
    logger.debug("list_properties: filters=%s -> %d rows", filters, len(props))
    return await _enrich(props)


async def get_property(db: AsyncSession, property_id: str) -> dict | None:
    """Listing detail with every image URL and a name/email owner summary."""
    prop = await db.get(Property, property_id)
    if prop is None:
        return None

    data = await _with_image_urls(prop)
    owner = await db.get(User, prop.owner_id)
    data["owner"] = {"name": owner.name, "email": owner.email} if owner else None
    return data


async def search_properties(
    db: AsyncSession,
    term: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[dict]:
    """Free-text search over approved listing titles.

    Titles matching more query words rank higher; ties go to the newest
    listing. Each hit carries at most one image URL.
    """
    tokens = _tokenize(term)
    if not tokens or limit <= 0:
        return []

    query = (
        select(Property)
        .where(Property.status == PropertyStatus.APPROVED)
        .order_by(Property.created_at.desc())
    )
    result = await db.execute(query)

    def score(prop: Property) -> int:
        lowered = prop.title.lower()
        return sum(1 for tok in tokens if tok in lowered)

    # titles are folded in Python: SQLite lower() leaves non-ASCII letters alone
    scored = [(score(p), p) for p in result.scalars()]
    hits = [(s, p) for s, p in scored if s]
    # sort is stable: newest-first order survives within equal scores
    ranked = [p for _, p in sorted(hits, key=lambda hit: hit[0], reverse=True)][:limit]
    return await _enrich(ranked, max_images=1)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


async def create_property(db: AsyncSession, user_id: str | None, payload: PropertyCreate) -> str:
    """Insert a listing owned by the caller. It always starts pending, unfeatured, unviewed."""
    if not user_id:
        raise AuthorizationError("Must be logged in to create property")
    if not payload.title.strip():
        raise InvalidInputError("title must not be empty")
    if payload.price < 0:
        raise InvalidInputError("price must not be negative")

    location = payload.location
    prop = Property(
        title=payload.title,
        description=payload.description,
        price=payload.price,
        offer_type=payload.type,
        property_type=payload.property_type,
        city=location.city,
        area=location.area,
        address=location.address,
        latitude=location.coordinates.lat if location.coordinates else None,
        longitude=location.coordinates.lng if location.coordinates else None,
        features=asdict(payload.features),
        images=list(payload.images),
        contact_info=asdict(payload.contact_info),
        owner_id=user_id,
        status=PropertyStatus.PENDING,
        featured=False,
        views=0,
    )
    db.add(prop)
    await db.commit()
    logger.debug("created property %s for owner %s", prop.id, user_id)
    return prop.id


async def toggle_favorite(db: AsyncSession, user_id: str | None, property_id: str) -> bool:
    """Flip the caller's favorite on a listing and return the new state.

    The unique (user_id, property_id) constraint is the source of truth: the
    delete either removes the row or reports zero rows, and an insert that
    collides with a concurrent insert means the pair is already favorited.
    """
    if not user_id:
        raise AuthorizationError("Must be logged in")

    result = await db.execute(
        delete(Favorite).where(
            Favorite.user_id == user_id,
            Favorite.property_id == property_id,
        )
    )
    if result.rowcount:
        await db.commit()
        logger.debug("unfavorited %s for %s", property_id, user_id)
        return False

    db.add(Favorite(user_id=user_id, property_id=property_id))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.debug("favorite %s/%s inserted concurrently", user_id, property_id)
    return True


async def increment_views(db: AsyncSession, property_id: str) -> None:
    """Bump the view counter; a missing listing is silently ignored."""
    await db.execute(
        update(Property)
        .where(Property.id == property_id)
        .values(views=Property.views + 1)
    )
    await db.commit()


async def get_favorites(db: AsyncSession, user_id: str | None) -> list[dict]:
    """The caller's favorited listings, oldest favorite first, each with one image URL."""
    if not user_id:
        return []

    result = await db.execute(
        select(Favorite.property_id)
        .where(Favorite.user_id == user_id)
        .order_by(Favorite.created_at)
    )
    property_ids = list(result.scalars().all())
    if not property_ids:
        return []

    result = await db.execute(select(Property).where(Property.id.in_(property_ids)))
    by_id = {p.id: p for p in result.scalars().all()}

    # favorites whose listing was deleted are dropped
    props = [by_id[pid] for pid in property_ids if pid in by_id]
    return await _enrich(props, max_images=1)
