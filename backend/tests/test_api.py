"""HTTP surface: caller resolution, status codes, end-to-end flows."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from aqar.errors import LLMError
from aqar.models.property import OfferType
from aqar.seed import SAMPLE_PROPERTIES

pytestmark = pytest.mark.asyncio

API = "/api/v1"


def _as(user) -> dict:
    return {"X-User-Id": user.id}


NEW_LISTING = {
    "title": "شقة جديدة في السيف",
    "description": "غرفتين وصالة",
    "price": 75000,
    "type": "sale",
    "property_type": "apartment",
    "location": {"city": "السيف", "area": "السيف", "address": "شارع 1"},
    "features": {"bedrooms": 2, "bathrooms": 2, "area": 120, "parking": True},
    "images": [],
    "contact_info": {"phone": "+973 1111 1111", "email": "seller@example.com"},
}


# ---------------------------------------------------------------------------
# T-1: health and caller resolution
# ---------------------------------------------------------------------------


async def test_health(client):
    resp = await client.get(f"{API}/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


async def test_create_listing_requires_known_caller(client):
    resp = await client.post(f"{API}/properties", json=NEW_LISTING)
    assert resp.status_code == 401

    resp = await client.post(f"{API}/properties", json=NEW_LISTING, headers={"X-User-Id": "ghost"})
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# T-2: listings
# ---------------------------------------------------------------------------


async def test_created_listing_is_pending_and_hidden(client, owner):
    resp = await client.post(f"{API}/properties", json=NEW_LISTING, headers=_as(owner))
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending"

    detail = await client.get(f"{API}/properties/{body['id']}")
    assert detail.status_code == 200
    assert detail.json()["status"] == "pending"
    assert detail.json()["featured"] is False

    listed = await client.get(f"{API}/properties")
    assert listed.json() == []


async def test_list_query_filters(client, owner, make_property):
    rent = await make_property(owner, offer_type=OfferType.RENT, city="Riffa")
    await make_property(owner, city="Riffa")

    resp = await client.get(f"{API}/properties", params={"type": "rent", "city": "riffa"})

    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()] == [rent.id]


async def test_unknown_listing_is_404(client):
    resp = await client.get(f"{API}/properties/nope")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Property not found"}


async def test_favorite_toggle_and_list(client, owner, make_property):
    prop = await make_property(owner, title="Marina flat")

    first = await client.post(f"{API}/properties/{prop.id}/favorite", headers=_as(owner))
    assert first.json() == {"favorited": True}
    favorites = await client.get(f"{API}/properties/favorites", headers=_as(owner))
    assert [f["title"] for f in favorites.json()] == ["Marina flat"]

    second = await client.post(f"{API}/properties/{prop.id}/favorite", headers=_as(owner))
    assert second.json() == {"favorited": False}

    anonymous = await client.get(f"{API}/properties/favorites")
    assert anonymous.json() == []


async def test_views_endpoint(client, owner, make_property):
    prop = await make_property(owner)

    resp = await client.post(f"{API}/properties/{prop.id}/views")
    assert resp.status_code == 204

    detail = await client.get(f"{API}/properties/{prop.id}")
    assert detail.json()["views"] == 1


async def test_search_endpoint(client, owner, make_property):
    await make_property(owner, title="فيلا مع مسبح")

    resp = await client.get(f"{API}/properties/search", params={"q": "فيلا"})

    assert resp.status_code == 200
    assert [p["title"] for p in resp.json()] == ["فيلا مع مسبح"]


async def test_seed_runs_once(client, owner):
    first = await client.post(f"{API}/properties/seed", headers=_as(owner))
    assert first.status_code == 201
    assert first.json()["count"] == len(SAMPLE_PROPERTIES)

    listed = await client.get(f"{API}/properties")
    assert len(listed.json()) == len(SAMPLE_PROPERTIES)

    second = await client.post(f"{API}/properties/seed", headers=_as(owner))
    assert second.json()["message"] == "Sample data already exists"


# ---------------------------------------------------------------------------
# T-3: reviews
# ---------------------------------------------------------------------------


async def test_review_flow(client, owner, make_user, make_property):
    prop = await make_property(owner)
    reviewer = await make_user("Mariam")
    url = f"{API}/properties/{prop.id}/reviews"

    created = await client.post(url, json={"rating": 4, "comment": "جميل"}, headers=_as(reviewer))
    assert created.status_code == 201

    duplicate = await client.post(url, json={"rating": 5, "comment": "again"}, headers=_as(reviewer))
    assert duplicate.status_code == 409

    invalid = await client.post(url, json={"rating": 9}, headers=_as(owner))
    assert invalid.status_code == 422

    stats = (await client.get(f"{url}/stats")).json()
    assert stats["total_reviews"] == 1
    assert stats["average_rating"] == 4
    assert stats["rating_distribution"] == {"1": 0, "2": 0, "3": 0, "4": 1, "5": 0}

    reviews = (await client.get(url)).json()
    assert reviews[0]["user_name"] == "Mariam"


# ---------------------------------------------------------------------------
# T-4: preferences
# ---------------------------------------------------------------------------


async def test_preferences_flow(client, make_user):
    user = await make_user("Yousef")

    assert (await client.get(f"{API}/preferences/{user.id}")).json() is None

    resp = await client.post(f"{API}/preferences/search-history", json={"search_term": "villa"}, headers=_as(user))
    assert resp.status_code == 204

    prefs = (await client.get(f"{API}/preferences/{user.id}")).json()
    assert prefs["search_history"] == ["villa"]
    assert prefs["price_range"] == {"min": 0, "max": 1000000}

    updated = await client.put(
        f"{API}/preferences",
        json={"preferred_type": "rent", "preferred_cities": ["Manama"], "price_range": {"min": 500, "max": 900}},
        headers=_as(user),
    )
    assert updated.status_code == 200
    assert updated.json()["preferred_cities"] == ["Manama"]
    assert updated.json()["search_history"] == ["villa"]

    anonymous = await client.put(f"{API}/preferences", json={})
    assert anonymous.status_code == 401


# ---------------------------------------------------------------------------
# T-5: inquiries
# ---------------------------------------------------------------------------


async def test_inquiry_flow(client, owner, make_user, make_property):
    prop = await make_property(owner)
    buyer = await make_user("Khalid")

    created = await client.post(
        f"{API}/inquiries", json={"property_id": prop.id, "message": "متى يمكنني المعاينة؟"}, headers=_as(buyer)
    )
    assert created.status_code == 201
    inquiry_id = created.json()["id"]

    forbidden = await client.post(f"{API}/inquiries/{inquiry_id}/respond", json={"response": "x"}, headers=_as(buyer))
    assert forbidden.status_code == 403

    answered = await client.post(
        f"{API}/inquiries/{inquiry_id}/respond", json={"response": "غداً الساعة 5"}, headers=_as(owner)
    )
    assert answered.json()["status"] == "responded"

    received = await client.get(f"{API}/inquiries", params={"role": "seller"}, headers=_as(owner))
    assert [i["id"] for i in received.json()] == [inquiry_id]


# ---------------------------------------------------------------------------
# T-6: assistant endpoints
# ---------------------------------------------------------------------------


async def test_recommendations_require_caller(client):
    resp = await client.post(f"{API}/ai/recommendations")
    assert resp.status_code == 401


async def test_recommendations_endpoint(client, owner, make_property):
    await make_property(owner, title="Pick me")

    with patch("aqar.ai.gateway.call_chat", new_callable=AsyncMock, return_value='[{"propertyIndex": 1, "reason": "Good value"}]'):
        resp = await client.post(f"{API}/ai/recommendations", headers=_as(owner))

    assert resp.status_code == 200
    [rec] = resp.json()
    assert rec["property_index"] == 0
    assert rec["reason"] == "Good value"
    assert rec["property"]["title"] == "Pick me"


async def test_market_analysis_then_latest(client, owner, make_property):
    await make_property(owner, price=120_000)

    with patch("aqar.ai.gateway.call_chat", new_callable=AsyncMock, return_value="Prices are stable."):
        resp = await client.post(f"{API}/ai/market-analysis", json={"city": "Manama"})

    assert resp.status_code == 200
    assert resp.json()["analysis"] == "Prices are stable."
    assert resp.json()["total_listings"] == 1

    latest = await client.get(f"{API}/market/analysis", params={"city": "Manama"})
    assert latest.json()["ai_insights"] == "Prices are stable."

    missing = await client.get(f"{API}/market/analysis", params={"city": "Muharraq"})
    assert missing.json() is None


async def test_smart_search_endpoint_falls_back(client, owner, make_property):
    await make_property(owner, title="Townhouse in Hamad Town")

    with patch("aqar.ai.gateway.call_chat", new_callable=AsyncMock, side_effect=LLMError("down")):
        resp = await client.post(f"{API}/ai/smart-search", json={"query": "townhouse"})

    body = resp.json()
    assert resp.status_code == 200
    assert body["search_params"] is None
    assert [p["title"] for p in body["results"]] == ["Townhouse in Hamad Town"]


async def test_chat_endpoint_never_fails(client):
    with patch("aqar.ai.gateway.call_chat", new_callable=AsyncMock, side_effect=LLMError("down")):
        resp = await client.post(f"{API}/ai/chat", json={"message": "hello"})

    assert resp.status_code == 200
    assert resp.json()["message"].startswith("عذراً")
