from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.api.deps import get_current_user_id, get_db
from aqar.repositories import inquiries
from aqar.schemas.inquiry import InquiryCreate, InquiryReply

router = APIRouter()


@router.post("", status_code=201)
async def create_inquiry(
    payload: InquiryCreate,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> dict:
    inquiry_id = await inquiries.create_inquiry(db, user_id, payload.property_id, payload.message)
    return {"id": inquiry_id, "status": "pending"}


@router.get("")
async def list_inquiries(
    role: str = Query("buyer", pattern="^(buyer|seller)$"),
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> list[dict]:
    return await inquiries.list_inquiries(db, user_id, role)


@router.post("/{inquiry_id}/respond")
async def respond_to_inquiry(
    inquiry_id: str,
    payload: InquiryReply,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> dict:
    return await inquiries.respond_to_inquiry(db, user_id, inquiry_id, payload.response)


@router.post("/{inquiry_id}/close")
async def close_inquiry(
    inquiry_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> dict:
    return await inquiries.close_inquiry(db, user_id, inquiry_id)
