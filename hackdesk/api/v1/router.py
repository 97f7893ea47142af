"""Main API router for v1."""
from fastapi import APIRouter

from hackdesk.api.v1.endpoints import admin, checkins

api_router = APIRouter(prefix="/api/v1")

# Include all endpoint routers
api_router.include_router(checkins.router, prefix="/check-in", tags=["Check-in"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
