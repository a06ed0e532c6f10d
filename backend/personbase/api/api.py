from fastapi import APIRouter

from personbase.api.routes import (
    health_router,
    databases_router,
    persons_router,
    fields_router,
    snapshots_router
)
from personbase.core.config import settings

# Create main API router
api_router = APIRouter(prefix=settings.API_V1_STR)

# Include all route modules
api_router.include_router(health_router)
api_router.include_router(databases_router)
api_router.include_router(persons_router)
api_router.include_router(fields_router)
api_router.include_router(snapshots_router)
