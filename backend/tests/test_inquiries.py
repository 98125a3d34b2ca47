"""Inquiries: buyer to seller messages with seller-driven status."""

from __future__ import annotations

import pytest

from aqar.errors import AuthorizationError, ForbiddenError, NotFoundError
from aqar.repositories.inquiries import close_inquiry, create_inquiry, list_inquiries, respond_to_inquiry

pytestmark = pytest.mark.asyncio


async def test_create_and_list_by_role(db, owner, make_user, make_property):
    buyer = await make_user("Buyer")
    prop = await make_property(owner)

    inquiry_id = await create_inquiry(db, buyer.id, prop.id, "Is it still available?")

    sent = await list_inquiries(db, buyer.id, "buyer")
    received = await list_inquiries(db, owner.id, "seller")
    assert [i["id"] for i in sent] == [inquiry_id]
    assert [i["id"] for i in received] == [inquiry_id]
    assert received[0]["seller_id"] == owner.id
    assert received[0]["status"] == "pending"


async def test_seller_responds_then_closes(db, owner, make_user, make_property):
    buyer = await make_user("Buyer")
    prop = await make_property(owner)
    inquiry_id = await create_inquiry(db, buyer.id, prop.id, "Price negotiable?")

    responded = await respond_to_inquiry(db, owner.id, inquiry_id, "Yes, a little")
    assert responded["status"] == "responded"
    assert responded["response"] == "Yes, a little"

    closed = await close_inquiry(db, owner.id, inquiry_id)
    assert closed["status"] == "closed"


async def test_only_seller_can_respond(db, owner, make_user, make_property):
    buyer = await make_user("Buyer")
    prop = await make_property(owner)
    inquiry_id = await create_inquiry(db, buyer.id, prop.id, "hello")

    with pytest.raises(ForbiddenError):
        await respond_to_inquiry(db, buyer.id, inquiry_id, "answering myself")


async def test_inquiry_errors(db, owner):
    with pytest.raises(AuthorizationError):
        await create_inquiry(db, None, "x", "hello")
    with pytest.raises(NotFoundError):
        await create_inquiry(db, owner.id, "missing", "hello")
    assert await list_inquiries(db, None) == []
