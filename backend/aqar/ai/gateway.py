"""Recommendation / analysis gateway.

Every operation here degrades instead of raising: a failed model call or an
unusable reply falls back to a deterministic answer built from data that is
already loaded.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from aqar.ai.client import call_chat
from aqar.ai.parsing import parse_json_response
from aqar.ai.prompts import (
    CHAT_SYSTEM_PROMPT,
    CHAT_USER_CONTEXT,
    MARKET_ANALYSIS_PROMPT,
    RECOMMENDATION_PROMPT,
    SMART_SEARCH_PROMPT,
)
from aqar.config import settings
from aqar.models.property import OfferType, PropertyType
from aqar.repositories.listings import get_favorites, list_properties, search_properties
from aqar.repositories.market import save_analysis
from aqar.repositories.preferences import get_preferences
from aqar.schemas.ai import (
    Fallback,
    MarketReport,
    Parsed,
    Recommendation,
    SearchOutcome,
    SearchParams,
    TypeBreakdown,
)
from aqar.schemas.property import ListingFilters

logger = logging.getLogger(__name__)

CANDIDATE_LIMIT = 100
PROMPT_LISTING_LIMIT = 20
RECOMMENDATION_COUNT = 5
SMART_SEARCH_LIMIT = 20
KEYWORD_SEARCH_LIMIT = 10
CHAT_LISTING_LIMIT = 10

PARSE_FALLBACK_REASON = "Matches your general preferences"
CALL_FALLBACK_REASON = "Popular property in your area"

INSUFFICIENT_DATA = "No sufficient data available for this market"
MARKET_PLACEHOLDER = "Unable to generate AI analysis at this time. Basic statistics are available."

CHAT_APOLOGY = "عذراً، حدث خطأ في الاتصال بالمساعد الذكي. يرجى المحاولة مرة أخرى لاحقاً."


def _join(values: list[str] | None, default: str) -> str:
    return ", ".join(values) if values else default


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


def _format_listing_lines(listings: list[dict]) -> str:
    lines: list[str] = []
    for i, p in enumerate(listings[:PROMPT_LISTING_LIMIT], 1):
        f = p.get("features", {})
        lines.append(
            f"{i}. {p['title']} - {p['property_type']} in {p['location']['city']} - "
            f"Price: {p['price']} - Features: {f.get('bedrooms', 0)}BR, "
            f"{f.get('bathrooms', 0)}BA, {f.get('area', 0)}sqm"
        )
    return "\n".join(lines)


def _build_recommendation_prompt(
    preferences: dict | None,
    favorites: list[dict],
    listings: list[dict],
) -> str:
    prefs = preferences or {}
    price_range = prefs.get("price_range") or {}
    favorite_lines = "\n".join(
        f"- {p['title']}: {p['property_type']} in {p['location']['city']}, {p['price']} price"
        for p in favorites
    )
    return RECOMMENDATION_PROMPT.format(
        preferred_type=prefs.get("preferred_type") or "any",
        preferred_cities=_join(prefs.get("preferred_cities"), "any"),
        price_min=price_range.get("min") or 0,
        price_max=price_range.get("max") or "unlimited",
        preferred_features=_join(prefs.get("preferred_features"), "none specified"),
        favorites=favorite_lines or "- none",
        properties=_format_listing_lines(listings),
    )


def _parse_recommendations(reply: str, listings: list[dict]) -> list[Recommendation]:
    """Turn the model's ``[{propertyIndex, reason}]`` into validated recommendations.

    The prompt numbers listings from 1; indices are converted to 0-based and
    anything out of range, duplicated or malformed is dropped.

    Raises:
        ValueError: the reply holds no JSON array.
    """
    data = parse_json_response(reply, expect="array")
    if isinstance(data, dict):
        data = data.get("recommendations")
    if not isinstance(data, list):
        raise ValueError("recommendation reply is not a JSON array")

    shown = min(len(listings), PROMPT_LISTING_LIMIT)
    seen: set[int] = set()
    recs: list[Recommendation] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        index = item.get("propertyIndex")
        if isinstance(index, bool) or not isinstance(index, int):
            continue
        index -= 1
        if not 0 <= index < shown or index in seen:
            continue
        seen.add(index)
        reason = item.get("reason")
        recs.append(
            Recommendation(
                property_index=index,
                reason=reason if isinstance(reason, str) and reason else PARSE_FALLBACK_REASON,
                property=listings[index],
            )
        )
        if len(recs) == RECOMMENDATION_COUNT:
            break
    return recs


def _fallback_recommendations(listings: list[dict], reason: str) -> list[Recommendation]:
    return [
        Recommendation(property_index=i, reason=reason, property=p)
        for i, p in enumerate(listings[:RECOMMENDATION_COUNT])
    ]


async def get_property_recommendations(db: AsyncSession, user_id: str) -> list[Recommendation]:
    """Ask the model to pick listings for a user; fall back to the first five listings."""
    preferences = await get_preferences(db, user_id)
    favorites = await get_favorites(db, user_id)
    listings = await list_properties(db, limit=CANDIDATE_LIMIT)

    prompt = _build_recommendation_prompt(preferences, favorites, listings)

    try:
        reply = await call_chat(
            [{"role": "user", "content": prompt}],
            model=settings.llm_fast_model,
            temperature=settings.recommendation_temperature,
        )
    except Exception:
        logger.exception("AI recommendation call failed")
        return _fallback_recommendations(listings, CALL_FALLBACK_REASON)

    try:
        recs = _parse_recommendations(reply, listings)
    except ValueError as exc:
        logger.warning("unparseable recommendation reply: %s", exc)
        recs = []

    if not recs:
        return _fallback_recommendations(listings, PARSE_FALLBACK_REASON)

    logger.info("recommendations for %s: %d picks", user_id, len(recs))
    return recs


# ---------------------------------------------------------------------------
# Market analysis
# ---------------------------------------------------------------------------


def _type_breakdown(listings: list[dict]) -> list[TypeBreakdown]:
    groups: dict[str, list[float]] = {}
    for p in listings:
        groups.setdefault(p["property_type"], []).append(p["price"])
    return [
        TypeBreakdown(type=ptype, count=len(prices), average_price=sum(prices) / len(prices))
        for ptype, prices in groups.items()
    ]


async def analyze_market(
    db: AsyncSession,
    city: str,
    property_type: str | None = None,
) -> MarketReport:
    """Price statistics for a city plus an AI narrative; each success appends a log row."""
    ptype: PropertyType | None = None
    if property_type:
        try:
            ptype = PropertyType(property_type)
        except ValueError:
            logger.info("market analysis: unknown property type %r", property_type)
            return MarketReport(analysis=INSUFFICIENT_DATA)

    listings = await list_properties(
        db,
        ListingFilters(city=city, property_type=ptype),
        limit=CANDIDATE_LIMIT,
    )
    if not listings:
        return MarketReport(analysis=INSUFFICIENT_DATA)

    prices = [p["price"] for p in listings]
    average_price = sum(prices) / len(prices)
    min_price, max_price = min(prices), max(prices)
    breakdown = _type_breakdown(listings)

    prompt = MARKET_ANALYSIS_PROMPT.format(
        city=city,
        total_listings=len(listings),
        average_price=average_price,
        min_price=min_price,
        max_price=max_price,
        property_types=", ".join(b.type for b in breakdown),
        breakdown="\n".join(
            f"- {b.type}: {b.count} listings, avg price: {b.average_price:,.0f}" for b in breakdown
        ),
    )

    price_range = {"min": min_price, "max": max_price}
    try:
        analysis = await call_chat(
            [{"role": "user", "content": prompt}],
            model=settings.llm_rich_model,
            temperature=settings.market_temperature,
        )
        await save_analysis(
            db,
            city=city,
            area="General",
            property_type=property_type or "All",
            average_price=average_price,
            price_change=0,
            total_listings=len(listings),
            ai_insights=analysis,
        )
    except Exception:
        logger.exception("market analysis failed for %s", city)
        await db.rollback()
        return MarketReport(
            analysis=MARKET_PLACEHOLDER,
            average_price=average_price,
            total_listings=len(listings),
            price_range=price_range,
            type_breakdown=breakdown,
            insights=["Market data collected successfully"],
        )

    logger.info("market analysis saved: city=%s type=%s listings=%d", city, property_type or "All", len(listings))
    return MarketReport(
        analysis=analysis,
        average_price=average_price,
        total_listings=len(listings),
        price_range=price_range,
        type_breakdown=breakdown,
    )


# ---------------------------------------------------------------------------
# Smart search
# ---------------------------------------------------------------------------


def _number(value: Any) -> float | None:
    """A finite number from a JSON value, or None."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.replace(",", ""))
        else:
            return None
    except (ValueError, OverflowError):
        return None
    # inf and nan never make sense as a price or room count
    return number if math.isfinite(number) else None


def _coerce_search_params(data: Any) -> SearchParams:
    """Validate the extracted JSON object field by field; unknown values become None.

    Raises:
        ValueError: the reply is not a JSON object.
    """
    if not isinstance(data, dict):
        raise ValueError("search reply is not a JSON object")

    offer_type = data.get("type")
    ptype = data.get("propertyType")
    city = data.get("city")
    bedrooms = _number(data.get("bedrooms"))
    features = data.get("features")

    return SearchParams(
        type=OfferType(offer_type) if offer_type in {t.value for t in OfferType} else None,
        property_type=PropertyType(ptype) if ptype in {t.value for t in PropertyType} else None,
        city=(city.strip() or None) if isinstance(city, str) else None,
        min_price=_number(data.get("minPrice")),
        max_price=_number(data.get("maxPrice")),
        bedrooms=int(bedrooms) if bedrooms is not None else None,
        features=[f for f in features if isinstance(f, str)] if isinstance(features, list) else None,
    )


async def extract_search_params(query: str) -> SearchOutcome:
    """Ask the fast model to turn a free-text (Arabic or English) query into SearchParams."""
    try:
        reply = await call_chat(
            [{"role": "user", "content": SMART_SEARCH_PROMPT.format(query=query)}],
            model=settings.llm_fast_model,
            temperature=settings.smart_search_temperature,
        )
    except Exception as exc:
        logger.exception("smart search call failed")
        return Fallback(reason=f"model call failed: {exc}")

    try:
        return Parsed(params=_coerce_search_params(parse_json_response(reply)))
    except ValueError as exc:
        logger.warning("unparseable smart search reply: %s", exc)
        return Fallback(reason=f"unparseable reply: {exc}")


def _params_to_dict(params: SearchParams) -> dict:
    return {
        "type": params.type.value if params.type else None,
        "property_type": params.property_type.value if params.property_type else None,
        "city": params.city,
        "min_price": params.min_price,
        "max_price": params.max_price,
        "bedrooms": params.bedrooms,
        "features": params.features,
    }


async def smart_search(db: AsyncSession, query: str) -> dict:
    """Structured search when the model parses the query, keyword search otherwise.

    ``search_params`` is None exactly when the keyword fallback was used.
    """
    outcome = await extract_search_params(query)

    match outcome:
        case Parsed(params=params):
            results = await list_properties(
                db,
                ListingFilters(
                    offer_type=params.type,
                    property_type=params.property_type,
                    city=params.city,
                    min_price=params.min_price,
                    max_price=params.max_price,
                ),
                limit=SMART_SEARCH_LIMIT,
            )
            search_params = _params_to_dict(params)
        case Fallback():
            results = await search_properties(db, query, limit=KEYWORD_SEARCH_LIMIT)
            search_params = None

    return {"query": query, "search_params": search_params, "results": results}


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


async def _user_context(db: AsyncSession, user_id: str) -> str:
    prefs = await get_preferences(db, user_id) or {}
    favorites = await get_favorites(db, user_id)
    price_range = prefs.get("price_range") or {}
    return CHAT_USER_CONTEXT.format(
        preferred_type=prefs.get("preferred_type") or "not specified",
        preferred_cities=_join(prefs.get("preferred_cities"), "not specified"),
        price_min=price_range.get("min") or 0,
        price_max=price_range.get("max") or "unlimited",
        favorite_count=len(favorites),
    )


async def chat_with_ai(db: AsyncSession, message: str, user_id: str | None = None) -> str:
    """Answer a user message with the assistant persona; apologise in Arabic on failure."""
    user_context = await _user_context(db, user_id) if user_id else ""
    recent = await list_properties(db, limit=CHAT_LISTING_LIMIT)
    property_context = "\n".join(
        f"{p['title']} - {p['property_type']} in {p['location']['city']} - {p['price']} BHD"
        for p in recent
    )
    system_prompt = CHAT_SYSTEM_PROMPT.format(
        user_context=user_context,
        property_context=property_context or "(none)",
    )

    try:
        return await call_chat(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": message},
            ],
            model=settings.llm_rich_model,
            temperature=settings.chat_temperature,
            max_tokens=settings.chat_max_tokens,
        )
    except Exception:
        logger.exception("AI chat failed")
        return CHAT_APOLOGY
