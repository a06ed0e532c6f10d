from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging

from personbase.services.exceptions import (
    PersonBaseError,
    ValidationFailed,
    CapacityExceeded,
    NotFound,
    FieldNameConflict,
    AccessDenied,
    InvalidFormat
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ValidationFailed: 422,
    CapacityExceeded: 409,
    NotFound: 404,
    FieldNameConflict: 409,
    AccessDenied: 403,
    InvalidFormat: 400,
}


def status_for(exc: PersonBaseError) -> int:
    for error_class, status_code in STATUS_CODES.items():
        if isinstance(exc, error_class):
            return status_code
    return 400


async def personbase_exception_handler(request: Request, exc: PersonBaseError):
    """Turn domain errors into the standard error envelope"""
    status_code = status_for(exc)
    logger.info(f"{exc.code}: {exc.message} - {request.url.path}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "title": exc.title,
            "message": exc.message,
            "error_code": exc.code,
            "details": exc.details,
            "status_code": status_code,
            "path": str(request.url.path)
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with structured error response"""
    logger.warning(f"HTTP {exc.status_code}: {exc.detail} - {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.detail,
            "status_code": exc.status_code,
            "path": str(request.url.path)
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed error information"""
    logger.warning(f"Validation error: {exc.errors()} - {request.url}")

    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "message": "Validation error",
            "status_code": 422,
            "errors": jsonable_errors(exc),
            "path": str(request.url.path)
        }
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(f"Unexpected error: {str(exc)} - {request.url}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "status_code": 500,
            "path": str(request.url.path)
        }
    )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
