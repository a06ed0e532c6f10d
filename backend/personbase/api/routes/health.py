from fastapi import APIRouter, Depends
from datetime import datetime

from personbase.api.schemas import HealthResponse, SuccessResponse
from personbase.core.config import settings
from personbase.services.database_manager import DatabaseManager
from .deps import get_manager

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", response_model=HealthResponse)
async def health_check(manager: DatabaseManager = Depends(get_manager)):
    """Health check endpoint"""
    try:
        await manager.storage.get(settings.REGISTRY_KEY)
        storage_status = "connected"
    except Exception:
        storage_status = "disconnected"

    return HealthResponse(
        status="healthy" if storage_status == "connected" else "unhealthy",
        version=settings.VERSION,
        timestamp=datetime.now().isoformat(),
        storage=storage_status
    )


@router.get("/storage", response_model=SuccessResponse)
async def storage_health(manager: DatabaseManager = Depends(get_manager)):
    """Registry size and stored contents documents"""
    databases = await manager.list_databases()
    stored = await manager.registry.contents.list_ids()
    return SuccessResponse(
        message="Storage is healthy",
        data={
            "database_count": len(databases),
            "stored_contents": len(stored),
            "person_count": sum(db.person_count for db in databases)
        }
    )


@router.get("/version", response_model=dict)
async def get_version():
    """Get API version information"""
    return {
        "service": "personbase-api",
        "version": settings.VERSION,
        "app_name": settings.APP_NAME,
        "debug": settings.DEBUG
    }
