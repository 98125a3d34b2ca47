"""Buyer-to-seller inquiries.

Status changes are made explicitly by the seller; nothing here moves an
inquiry on its own.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.errors import AuthorizationError, ForbiddenError, InvalidInputError, NotFoundError
from aqar.models.inquiry import Inquiry, InquiryStatus
from aqar.models.property import Property

logger = logging.getLogger(__name__)


async def create_inquiry(db: AsyncSession, user_id: str | None, property_id: str, message: str) -> str:
    if not user_id:
        raise AuthorizationError("Must be logged in to send an inquiry")
    if not message.strip():
        raise InvalidInputError("message must not be empty")

    prop = await db.get(Property, property_id)
    if prop is None:
        raise NotFoundError("Property not found")

    inquiry = Inquiry(
        property_id=property_id,
        buyer_id=user_id,
        seller_id=prop.owner_id,
        message=message,
        status=InquiryStatus.PENDING,
    )
    db.add(inquiry)
    await db.commit()
    logger.debug("inquiry %s: buyer=%s seller=%s", inquiry.id, user_id, prop.owner_id)
    return inquiry.id


async def list_inquiries(db: AsyncSession, user_id: str | None, role: str = "buyer") -> list[dict]:
    """Inquiries the caller sent (``role="buyer"``) or received (``role="seller"``)."""
    if not user_id:
        return []

    match role:
        case "buyer":
            column = Inquiry.buyer_id
        case "seller":
            column = Inquiry.seller_id
        case _:
            raise InvalidInputError("role must be 'buyer' or 'seller'")

    result = await db.execute(
        select(Inquiry).where(column == user_id).order_by(Inquiry.created_at.desc())
    )
    return [inq.to_dict() for inq in result.scalars().all()]


async def _seller_inquiry(db: AsyncSession, user_id: str | None, inquiry_id: str) -> Inquiry:
    if not user_id:
        raise AuthorizationError("Must be logged in")
    inquiry = await db.get(Inquiry, inquiry_id)
    if inquiry is None:
        raise NotFoundError("Inquiry not found")
    if inquiry.seller_id != user_id:
        raise ForbiddenError("Only the seller can update this inquiry")
    return inquiry


async def respond_to_inquiry(db: AsyncSession, user_id: str | None, inquiry_id: str, response: str) -> dict:
    inquiry = await _seller_inquiry(db, user_id, inquiry_id)
    inquiry.response = response
    inquiry.status = InquiryStatus.RESPONDED
    await db.commit()
    return inquiry.to_dict()


async def close_inquiry(db: AsyncSession, user_id: str | None, inquiry_id: str) -> dict:
    inquiry = await _seller_inquiry(db, user_id, inquiry_id)
    inquiry.status = InquiryStatus.CLOSED
    await db.commit()
    return inquiry.to_dict()
