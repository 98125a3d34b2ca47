"""Listing browse, detail, create, favorite and view-count endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.api.deps import get_current_user_id, get_db
from aqar.errors import NotFoundError
from aqar.models.property import OfferType, PropertyType
from aqar.repositories import listings
from aqar.schemas.property import ListingFilters, PropertyCreate
from aqar.seed import seed_sample_data

router = APIRouter()


@router.get("")
async def list_properties(
    db: AsyncSession = Depends(get_db),
    offer_type: OfferType | None = Query(None, alias="type", description="sale / rent"),
    property_type: PropertyType | None = Query(None),
    city: str | None = Query(None, description="case-insensitive substring"),
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    featured: bool | None = Query(None),
    limit: int = Query(listings.DEFAULT_LIST_LIMIT, ge=1, le=100),
) -> list[dict]:
    """Approved listings, featured first then newest first."""
    filters = ListingFilters(
        offer_type=offer_type,
        property_type=property_type,
        city=city,
        min_price=min_price,
        max_price=max_price,
        featured=featured,
    )
    return await listings.list_properties(db, filters, limit=limit)


@router.get("/search")
async def search_properties(
    q: str = Query(..., min_length=1, description="search term"),
    limit: int = Query(listings.DEFAULT_SEARCH_LIMIT, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    return await listings.search_properties(db, q, limit=limit)


@router.get("/favorites")
async def get_favorites(
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> list[dict]:
    return await listings.get_favorites(db, user_id)


@router.post("/seed", status_code=201)
async def seed(
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> dict:
    """Load the sample listings into an empty database."""
    return await seed_sample_data(db, user_id)


@router.post("", status_code=201)
async def create_property(
    payload: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> dict:
    property_id = await listings.create_property(db, user_id, payload)
    return {"id": property_id, "status": "pending"}


@router.get("/{property_id}")
async def get_property(property_id: str, db: AsyncSession = Depends(get_db)) -> dict:
    prop = await listings.get_property(db, property_id)
    if prop is None:
        raise NotFoundError("Property not found")
    return prop


@router.post("/{property_id}/favorite")
async def toggle_favorite(
    property_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> dict:
    favorited = await listings.toggle_favorite(db, user_id, property_id)
    return {"favorited": favorited}


@router.post("/{property_id}/views", status_code=204)
async def increment_views(property_id: str, db: AsyncSession = Depends(get_db)) -> None:
    await listings.increment_views(db, property_id)
