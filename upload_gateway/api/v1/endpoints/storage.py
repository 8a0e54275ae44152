import structlog
from fastapi import APIRouter, Depends, Query, Request
from starlette.requests import ClientDisconnect

from upload_gateway.api.deps import get_listing_service, get_upload_service
from upload_gateway.schemas.common import ErrorResponse
from upload_gateway.schemas.storage import (
    ListObjectsResponse,
    SignUploadRequest,
    SignUploadResponse,
    UploadProxyResponse,
)
from upload_gateway.services.listing_service import ListingService
from upload_gateway.services.upload_service import UploadService

logger = structlog.get_logger()

router = APIRouter(tags=["storage"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/sign-upload", response_model=SignUploadResponse, responses=ERROR_RESPONSES)
async def sign_upload(
    payload: SignUploadRequest,
    service: UploadService = Depends(get_upload_service),
):
    return SignUploadResponse(**service.sign_upload(payload.filename, payload.contentType))


@router.post(
    "/upload-proxy",
    response_model=UploadProxyResponse,
    responses={**ERROR_RESPONSES, 413: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def upload_proxy(
    request: Request,
    filename: str | None = Query(default=None),
    service: UploadService = Depends(get_upload_service),
):
    # Raw body: read as a stream, never parsed.
    try:
        result = await service.relay(
            body=request.stream(),
            content_type=request.headers.get("content-type"),
            content_length=request.headers.get("content-length"),
            filename=filename,
        )
    except ClientDisconnect:
        logger.warning("upload_client_disconnected", filename=filename)
        raise
    return UploadProxyResponse(key=result.key)


@router.get("/list", response_model=ListObjectsResponse, responses=ERROR_RESPONSES)
async def list_objects(
    prefix: str | None = Query(default=None),
    max_keys: int | None = Query(default=None, alias="maxKeys", ge=1),
    continuation_token: str | None = Query(default=None, alias="continuationToken"),
    service: ListingService = Depends(get_listing_service),
):
    return ListObjectsResponse(**await service.list_objects(prefix, max_keys, continuation_token))
