from upload_gateway.core.config import Settings
from upload_gateway.integrations.storage.base import StorageProvider
from upload_gateway.integrations.storage.s3 import S3StorageProvider


def build_storage_provider(settings: Settings) -> StorageProvider:
    return S3StorageProvider(settings)
