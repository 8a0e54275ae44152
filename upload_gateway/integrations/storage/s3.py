import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from upload_gateway.core.config import Settings
from upload_gateway.core.errors import InvalidInput, ListingError, SigningError
from upload_gateway.integrations.storage.base import (
    DEFAULT_CONTENT_TYPE,
    ObjectListing,
    SignedUpload,
    StorageProvider,
    StoredObject,
)

logger = structlog.get_logger()


class S3StorageProvider(StorageProvider):
    name = "s3"

    def __init__(self, settings: Settings, client=None) -> None:
        self.settings = settings
        self.client = client or boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint or None,
            region_name=settings.s3_region,
            aws_access_key_id=settings.s3_access_key or None,
            aws_secret_access_key=settings.s3_secret_key or None,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": settings.s3_addressing_style},
            ),
        )
        self.bucket = settings.s3_bucket

    def sign_upload(self, object_key: str, mime_type: str | None, ttl_seconds: int) -> SignedUpload:
        if not object_key:
            raise InvalidInput("object key is required")
        if not self.settings.credentials_configured:
            raise SigningError("store credentials or bucket are not configured")
        content_type = mime_type or DEFAULT_CONTENT_TYPE
        try:
            url = self.client.generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": self.bucket,
                    "Key": object_key,
                    "ContentType": content_type,
                },
                ExpiresIn=ttl_seconds,
                HttpMethod="PUT",
            )
        except (BotoCoreError, ClientError) as exc:
            raise SigningError(str(exc)) from exc
        return SignedUpload(
            upload_url=url,
            method="PUT",
            headers={"Content-Type": content_type},
            object_key=object_key,
            bucket=self.bucket,
            expires_in=ttl_seconds,
        )

    def list_objects(
        self,
        prefix: str,
        max_keys: int,
        continuation_token: str | None = None,
    ) -> ObjectListing:
        if not self.settings.credentials_configured:
            raise ListingError("store credentials or bucket are not configured")
        params = {"Bucket": self.bucket, "Prefix": prefix, "MaxKeys": max_keys}
        if continuation_token:
            params["ContinuationToken"] = continuation_token
        try:
            out = self.client.list_objects_v2(**params)
        except (BotoCoreError, ClientError) as exc:
            raise ListingError(str(exc)) from exc
        objects = [
            StoredObject(
                key=obj["Key"],
                size=int(obj.get("Size", 0)),
                last_modified=obj.get("LastModified"),
            )
            for obj in out.get("Contents", [])
        ]
        logger.debug("store_list_page", prefix=prefix, count=len(objects), truncated=out.get("IsTruncated", False))
        return ObjectListing(
            objects=objects,
            is_truncated=bool(out.get("IsTruncated", False)),
            next_continuation_token=out.get("NextContinuationToken"),
        )
