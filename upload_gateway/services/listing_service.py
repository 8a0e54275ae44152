from datetime import UTC, datetime
from urllib.parse import quote

import structlog
from fastapi.concurrency import run_in_threadpool

from upload_gateway.core.config import Settings
from upload_gateway.integrations.storage.base import StorageProvider, StoredObject

logger = structlog.get_logger()

_EPOCH = datetime.min.replace(tzinfo=UTC)


class ListingService:
    def __init__(self, settings: Settings, provider: StorageProvider):
        self.settings = settings
        self.provider = provider

    def public_url(self, key: str) -> str | None:
        base = self.settings.public_base_url
        if not base:
            return None
        return f"{base}/{quote(key, safe='/')}"

    def clamp_max_keys(self, max_keys: int | None) -> int:
        cap = self.settings.list_max_keys
        if max_keys is None:
            return cap
        return max(1, min(int(max_keys), cap))

    async def list_objects(
        self,
        prefix: str | None = None,
        max_keys: int | None = None,
        continuation_token: str | None = None,
    ) -> dict:
        """Newest-first page of objects under ``prefix``.

        Entries beyond ``max_keys`` are dropped and reported through
        ``truncated``. ``nextContinuationToken`` is only ever the store's own
        token: when the cut happens here because the store ignored
        ``MaxKeys`` and sent no token, ``truncated`` is true and the token is
        null, so the rest cannot be paged.
        """
        if prefix is None:
            prefix = self.settings.list_default_prefix
        limit = self.clamp_max_keys(max_keys)
        listing = await run_in_threadpool(
            self.provider.list_objects,
            prefix,
            limit,
            continuation_token,
        )
        objects = listing.objects
        truncated = listing.is_truncated or len(objects) > limit
        objects = sorted(objects[:limit], key=_sort_key, reverse=True)
        items = [
            {
                "key": obj.key,
                "size": obj.size,
                "lastModified": obj.last_modified,
                "publicUrl": self.public_url(obj.key),
            }
            for obj in objects
        ]
        logger.info("objects_listed", prefix=prefix, count=len(items), truncated=truncated)
        return {
            "items": items,
            "truncated": truncated,
            "nextContinuationToken": listing.next_continuation_token if truncated else None,
        }


def _sort_key(obj: StoredObject) -> datetime:
    value = obj.last_modified
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
