import httpx
from fastapi import Depends, Request

from upload_gateway.core.config import Settings
from upload_gateway.integrations.storage.base import StorageProvider
from upload_gateway.services.listing_service import ListingService
from upload_gateway.services.upload_service import UploadService


def app_settings(request: Request) -> Settings:
    return request.app.state.settings


def storage_provider(request: Request) -> StorageProvider:
    return request.app.state.storage


def store_http_client(request: Request) -> httpx.AsyncClient | None:
    return request.app.state.http_client


def get_upload_service(
    settings: Settings = Depends(app_settings),
    provider: StorageProvider = Depends(storage_provider),
    http_client: httpx.AsyncClient | None = Depends(store_http_client),
) -> UploadService:
    return UploadService(settings, provider, http_client)


def get_listing_service(
    settings: Settings = Depends(app_settings),
    provider: StorageProvider = Depends(storage_provider),
) -> ListingService:
    return ListingService(settings, provider)
