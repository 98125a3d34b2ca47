"""Request-boundary dependencies.

The caller is resolved once per request from the ``X-User-Id`` header set by
the auth provider in front of the app, then passed explicitly into the
repository and gateway functions.
"""

from __future__ import annotations

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from aqar.database import get_db
from aqar.errors import AuthorizationError
from aqar.models.user import User

__all__ = ["get_db", "get_current_user_id", "require_user_id"]


async def get_current_user_id(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    db: AsyncSession = Depends(get_db),
) -> str | None:
    """The caller's id, or None for anonymous or unknown callers."""
    if not x_user_id:
        return None
    user = await db.get(User, x_user_id)
    return user.id if user else None


async def require_user_id(user_id: str | None = Depends(get_current_user_id)) -> str:
    if not user_id:
        raise AuthorizationError("Must be logged in")
    return user_id
