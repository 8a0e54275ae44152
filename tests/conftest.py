from datetime import UTC, datetime, timedelta

import httpx
import pytest
from fastapi.testclient import TestClient

from upload_gateway.core.config import Settings
from upload_gateway.integrations.storage.base import (
    DEFAULT_CONTENT_TYPE,
    ObjectListing,
    SignedUpload,
    StorageProvider,
    StoredObject,
)
from upload_gateway.main import create_app


def make_settings(**overrides) -> Settings:
    values = {
        "s3_endpoint": "https://s3.eu-central-003.backblazeb2.com",
        "s3_region": "eu-central-003",
        "s3_bucket": "test-bucket",
        "s3_access_key": "test-access-key",
        "s3_secret_key": "test-secret-key",
        "s3_public_base_url": "https://cdn.example.com/",
        "cors_allow_origins": "https://app.example.com, http://localhost:5173",
        "storage_max_upload_bytes": 1024,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_objects(count: int, prefix: str = "uploads/") -> list[StoredObject]:
    start = datetime(2024, 1, 1, tzinfo=UTC)
    return [
        StoredObject(key=f"{prefix}{i:05d}.mp4", size=i, last_modified=start + timedelta(minutes=i))
        for i in range(count)
    ]


class FakeStorageProvider(StorageProvider):
    name = "fake"

    def __init__(self, objects: list[StoredObject] | None = None):
        self.bucket = "test-bucket"
        self.objects = objects or []
        self.sign_calls: list[tuple[str, str | None, int]] = []
        self.list_calls: list[tuple[str, int, str | None]] = []
        self.sign_error: Exception | None = None
        self.list_error: Exception | None = None

    def sign_upload(self, object_key: str, mime_type: str | None, ttl_seconds: int) -> SignedUpload:
        self.sign_calls.append((object_key, mime_type, ttl_seconds))
        if self.sign_error:
            raise self.sign_error
        return SignedUpload(
            upload_url=f"https://store.test/{self.bucket}/{object_key}?X-Amz-Expires={ttl_seconds}&X-Amz-Signature=abc",
            method="PUT",
            headers={"Content-Type": mime_type or DEFAULT_CONTENT_TYPE},
            object_key=object_key,
            bucket=self.bucket,
            expires_in=ttl_seconds,
        )

    def list_objects(self, prefix: str, max_keys: int, continuation_token: str | None = None) -> ObjectListing:
        self.list_calls.append((prefix, max_keys, continuation_token))
        if self.list_error:
            raise self.list_error
        # Hand back everything so the caller's own cap is what gets exercised.
        matching = [obj for obj in self.objects if obj.key.startswith(prefix)]
        truncated = len(matching) > max_keys
        return ObjectListing(
            objects=matching,
            is_truncated=truncated,
            next_continuation_token="next-page" if truncated else None,
        )


class FakeStore:
    """Stands in for the object store's HTTP endpoint behind ``httpx.MockTransport``."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.text = ""
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error:
            raise self.error
        return httpx.Response(self.status_code, text=self.text)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def storage() -> FakeStorageProvider:
    return FakeStorageProvider()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def client(settings, storage, store):
    app = create_app(settings=settings, storage=storage, http_client=store.client())
    with TestClient(app) as test_client:
        yield test_client

