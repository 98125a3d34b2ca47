"""Image blob lookup.

Listings store opaque storage ids; this module turns them into URLs. Blobs
live under ``settings.upload_dir`` and are served from
``settings.media_base_url`` by whatever fronts the app.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from aqar.config import settings

logger = logging.getLogger(__name__)


class LocalImageStorage:
    """Resolve storage ids against files in the upload directory."""

    def _path(self, storage_id: str) -> Path | None:
        root = Path(settings.upload_dir).resolve()
        candidate = (root / storage_id).resolve()
        # ids are flat names, never paths
        if candidate.parent != root:
            return None
        return candidate

    async def get_url(self, storage_id: str) -> str | None:
        path = self._path(storage_id)
        if path is None:
            return None
        exists = await asyncio.to_thread(path.is_file)
        if not exists:
            return None
        return f"{settings.media_base_url.rstrip('/')}/{storage_id}"

    async def resolve_many(self, storage_ids: list[str]) -> list[str | None]:
        """Resolve ids concurrently, keeping order. A failed lookup yields None."""
        results = await asyncio.gather(
            *(self.get_url(sid) for sid in storage_ids),
            return_exceptions=True,
        )
        urls: list[str | None] = []
        for sid, result in zip(storage_ids, results):
            if isinstance(result, BaseException):
                logger.warning("image lookup failed for %s: %s", sid, result)
                urls.append(None)
            else:
                urls.append(result)
        return urls


image_storage = LocalImageStorage()
