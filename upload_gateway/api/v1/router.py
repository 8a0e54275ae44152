from fastapi import APIRouter

from upload_gateway.api.v1.endpoints import health, storage

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(storage.router)
