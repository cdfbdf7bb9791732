"""API sub-routers assembled into a single api_router."""

from fastapi import APIRouter

from src.api.routers.business import health
from src.api.routers.business import router as business_router

api_router = APIRouter()

api_router.include_router(business_router, prefix="/business", tags=["business"])
api_router.add_api_route("/health", health, methods=["GET"], tags=["health"])
