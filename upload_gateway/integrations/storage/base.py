from dataclasses import dataclass, field
from datetime import datetime

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class SignedUpload:
    upload_url: str
    method: str
    headers: dict[str, str]
    object_key: str
    bucket: str
    expires_in: int


@dataclass
class StoredObject:
    key: str
    size: int
    last_modified: datetime | None


@dataclass
class ObjectListing:
    objects: list[StoredObject] = field(default_factory=list)
    is_truncated: bool = False
    next_continuation_token: str | None = None


class StorageProvider:
    name: str = "base"
    bucket: str = ""

    def sign_upload(self, object_key: str, mime_type: str | None, ttl_seconds: int) -> SignedUpload:
        raise NotImplementedError

    def list_objects(
        self,
        prefix: str,
        max_keys: int,
        continuation_token: str | None = None,
    ) -> ObjectListing:
        raise NotImplementedError
