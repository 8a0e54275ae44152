from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import ClientDisconnect

from upload_gateway.api.v1.router import api_router
from upload_gateway.core.config import Settings, get_settings
from upload_gateway.core.cors import origin_allowed
from upload_gateway.core.errors import CorsRejected, GatewayError, InvalidInput, PayloadTooLarge
from upload_gateway.core.logging import configure_logging
from upload_gateway.core.metrics import REQUEST_COUNTER
from upload_gateway.core.security import apply_security_headers, exceeds_json_limit
from upload_gateway.integrations.storage.base import StorageProvider
from upload_gateway.integrations.storage.factory import build_storage_provider

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)
    if not settings.credentials_configured:
        logger.warning(
            "storage_credentials_missing",
            detail="S3 access key, secret key or bucket is empty; store calls will fail",
        )
    owns_client = app.state.http_client is None
    if owns_client:
        app.state.http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.store_http_timeout_seconds, connect=10.0),
        )
    logger.info("startup", env=settings.app_env, bucket=settings.s3_bucket, endpoint=settings.s3_endpoint)
    yield
    if owns_client:
        await app.state.http_client.aclose()
        app.state.http_client = None
    logger.info("shutdown")


def create_app(
    settings: Settings | None = None,
    storage: StorageProvider | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage or build_storage_provider(settings)
    app.state.http_client = http_client

    allowed_origins = settings.allowed_origins
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_log_middleware(request: Request, call_next):
        response = await call_next(request)
        REQUEST_COUNTER.labels(path=request.url.path, status=str(response.status_code)).inc()
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
        )
        return response

    proxy_path = f"{settings.api_prefix}/upload-proxy"

    @app.middleware("http")
    async def json_body_limit_middleware(request: Request, call_next):
        # /upload-proxy carries raw bodies of any type and has its own bound.
        if request.url.path != proxy_path and exceeds_json_limit(
            request.headers.get("content-type"),
            request.headers.get("content-length"),
            settings.json_body_limit_bytes,
        ):
            exc = PayloadTooLarge(f"json body exceeds {settings.json_body_limit_bytes} bytes")
            logger.warning("json_body_too_large", path=request.url.path, details=exc.details)
            return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
        return await call_next(request)

    @app.middleware("http")
    async def origin_guard_middleware(request: Request, call_next):
        origin = request.headers.get("origin")
        if not origin_allowed(origin, allowed_origins):
            exc = CorsRejected(f"origin {origin} is not allowed")
            logger.warning("origin_rejected", origin=origin, method=request.method, path=request.url.path)
            return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
        return await call_next(request)

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        response = await call_next(request)
        apply_security_headers(response.headers)
        return response

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            exc.error,
            method=request.method,
            path=request.url.path,
            status=exc.status_code,
            details=exc.details,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        error = InvalidInput("; ".join(_describe(err) for err in exc.errors()))
        logger.warning("invalid_input", path=request.url.path, details=error.details)
        return JSONResponse(status_code=error.status_code, content=error.to_payload())

    @app.exception_handler(ClientDisconnect)
    async def client_disconnect_handler(_: Request, exc: ClientDisconnect):
        # Nobody is listening; the outbound PUT has already been abandoned.
        return Response(status_code=499)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_: Request, exc: Exception):
        logger.exception("unhandled_exception", error=str(exc))
        return JSONResponse(status_code=500, content={"error": "internal_error"})

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


def _describe(err: dict) -> str:
    location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
    return f"{location}: {err.get('msg', 'invalid')}" if location else err.get("msg", "invalid")
