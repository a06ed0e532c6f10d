import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager

from personbase.core.config import settings
from personbase.api.api import api_router
from personbase.api.errors import (
    personbase_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler
)
from personbase.db.database import get_storage
from personbase.services.exceptions import PersonBaseError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: open the key-value store once for the whole process
    storage = get_storage()
    await storage.connect()
    logger.info(f"{settings.APP_NAME} {settings.VERSION} started")

    yield

    # Shutdown
    await storage.disconnect()


app = FastAPI(
    title="PersonBase API",
    description="Person record manager with per-database custom fields, passwords and snapshots",
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"]
)

# Add exception handlers
app.add_exception_handler(PersonBaseError, personbase_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include API routes
app.include_router(api_router)


@app.get("/")
async def root():
    return {
        "message": "PersonBase API",
        "version": settings.VERSION,
        "status": "operational",
        "docs_url": "/docs"
    }
