from .health import router as health_router
from .databases import router as databases_router
from .persons import router as persons_router
from .fields import router as fields_router
from .snapshots import router as snapshots_router

__all__ = [
    "health_router",
    "databases_router",
    "persons_router",
    "fields_router",
    "snapshots_router"
]
