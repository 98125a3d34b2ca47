"""Review repository: one review per (user, property), rating statistics."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.errors import AuthorizationError, DuplicateReviewError, InvalidInputError, NotFoundError
from aqar.models.property import Property
from aqar.models.review import Review
from aqar.models.user import User
from aqar.schemas.review import ReviewStats

logger = logging.getLogger(__name__)

RATING_BUCKETS = (1, 2, 3, 4, 5)


def _round_half_up(value: float) -> float:
    """One decimal place, halves rounded up (4.25 -> 4.3)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


async def create_review(
    db: AsyncSession,
    user_id: str | None,
    property_id: str,
    rating: int,
    comment: str,
) -> str:
    if not user_id:
        raise AuthorizationError("Must be logged in to leave a review")
    if isinstance(rating, bool) or not isinstance(rating, int) or rating not in RATING_BUCKETS:
        raise InvalidInputError("rating must be an integer between 1 and 5")
    if await db.get(Property, property_id) is None:
        raise NotFoundError("Property not found")

    existing = await db.execute(
        select(Review.id).where(Review.property_id == property_id, Review.user_id == user_id)
    )
    if existing.first() is not None:
        raise DuplicateReviewError("You have already reviewed this property")

    review = Review(property_id=property_id, user_id=user_id, rating=rating, comment=comment, helpful=0)
    db.add(review)
    try:
        await db.commit()
    except IntegrityError:
        # a concurrent insert for the same pair won the unique constraint
        await db.rollback()
        raise DuplicateReviewError("You have already reviewed this property") from None

    logger.debug("review %s created: property=%s user=%s rating=%d", review.id, property_id, user_id, rating)
    return review.id


async def list_reviews(db: AsyncSession, property_id: str) -> list[dict]:
    """Reviews for a listing, newest first, with the reviewer's display name."""
    result = await db.execute(
        select(Review, User.name)
        .outerjoin(User, User.id == Review.user_id)
        .where(Review.property_id == property_id)
        .order_by(Review.created_at.desc())
    )
    return [
        {
            "id": review.id,
            "property_id": review.property_id,
            "user_id": review.user_id,
            "user_name": name or "Anonymous User",
            "rating": review.rating,
            "comment": review.comment,
            "helpful": review.helpful,
            "created_at": review.created_at.isoformat() if review.created_at else None,
        }
        for review, name in result.all()
    ]


async def get_review_stats(db: AsyncSession, property_id: str) -> ReviewStats:
    result = await db.execute(select(Review.rating).where(Review.property_id == property_id))
    ratings = list(result.scalars().all())
    if not ratings:
        return ReviewStats()

    distribution = {bucket: 0 for bucket in RATING_BUCKETS}
    for rating in ratings:
        if rating in distribution:
            distribution[rating] += 1

    return ReviewStats(
        average_rating=_round_half_up(sum(ratings) / len(ratings)),
        total_reviews=len(ratings),
        rating_distribution=distribution,
    )
