from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx
import structlog

from upload_gateway.core.config import Settings
from upload_gateway.core.errors import InvalidInput, PayloadTooLarge, UpstreamPutFailed
from upload_gateway.core.metrics import RELAY_BYTES, RELAY_COUNTER
from upload_gateway.integrations.storage.base import StorageProvider
from upload_gateway.utils.keys import build_object_key

logger = structlog.get_logger()

UPSTREAM_BODY_LIMIT = 2000


@dataclass
class RelayResult:
    key: str
    size_bytes: int


class UploadService:
    def __init__(self, settings: Settings, provider: StorageProvider, http_client: httpx.AsyncClient | None = None):
        self.settings = settings
        self.provider = provider
        self.http_client = http_client

    def _object_key(self, filename: str | None) -> str:
        try:
            return build_object_key(filename or "", prefix=self.settings.storage_key_prefix)
        except ValueError as exc:
            raise InvalidInput("filename required") from exc

    def sign_upload(self, filename: str, content_type: str | None) -> dict:
        key = self._object_key(filename)
        signed = self.provider.sign_upload(
            object_key=key,
            mime_type=content_type,
            ttl_seconds=self.settings.storage_sign_ttl_seconds,
        )
        logger.info("upload_signed", key=key, content_type=signed.headers["Content-Type"])
        return {"uploadUrl": signed.upload_url, "key": signed.object_key, "expiresIn": signed.expires_in}

    async def relay(
        self,
        body: AsyncIterator[bytes],
        content_type: str | None,
        content_length: str | None,
        filename: str | None = None,
    ) -> RelayResult:
        """Stream ``body`` to the store under a freshly signed key.

        The declared length is checked before anything is signed, so an
        oversized request never causes a store write. The body is consumed
        once; a failed PUT cannot be replayed and is reported as-is.
        """
        size = self._declared_size(content_length)
        if not (filename or "").strip():
            filename = self.settings.proxy_default_filename
        key = self._object_key(filename)
        if self.http_client is None:
            raise RuntimeError("upload relay has no HTTP client")

        signed = self.provider.sign_upload(
            object_key=key,
            mime_type=content_type,
            ttl_seconds=self.settings.storage_proxy_ttl_seconds,
        )
        headers = {**signed.headers, "Content-Length": str(size)}

        request = self.http_client.build_request(
            signed.method,
            signed.upload_url,
            content=self._bounded(body, size),
            headers=headers,
        )
        try:
            response = await self.http_client.send(request)
        except httpx.HTTPError as exc:
            RELAY_COUNTER.labels(outcome="transport_error").inc()
            logger.error("upload_relay_failed", key=key, error=str(exc))
            raise UpstreamPutFailed(None, str(exc)) from exc

        if not response.is_success:
            RELAY_COUNTER.labels(outcome="rejected").inc()
            text = response.text[:UPSTREAM_BODY_LIMIT]
            logger.error("upload_relay_failed", key=key, upstream_status=response.status_code, body=text)
            raise UpstreamPutFailed(response.status_code, text)

        RELAY_COUNTER.labels(outcome="ok").inc()
        RELAY_BYTES.inc(size)
        logger.info("upload_relayed", key=key, size_bytes=size, content_type=headers["Content-Type"])
        return RelayResult(key=key, size_bytes=size)

    def _declared_size(self, content_length: str | None) -> int:
        if content_length is None or not content_length.strip():
            raise InvalidInput("content-length header required")
        try:
            size = int(content_length)
        except ValueError as exc:
            raise InvalidInput("content-length header is not a number") from exc
        if size <= 0:
            raise InvalidInput("request body is empty")
        if size > self.settings.storage_max_upload_bytes:
            raise PayloadTooLarge(f"{size} bytes exceeds limit of {self.settings.storage_max_upload_bytes} bytes")
        return size

    async def _bounded(self, body: AsyncIterator[bytes], limit: int) -> AsyncIterator[bytes]:
        received = 0
        async for chunk in body:
            if not chunk:
                continue
            received += len(chunk)
            if received > limit:
                raise PayloadTooLarge(f"body exceeds declared length of {limit} bytes")
            yield chunk
