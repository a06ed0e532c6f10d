from pydantic import BaseModel, ConfigDict
from typing import Optional, TypeVar, Generic

T = TypeVar('T')


class SuccessResponse(BaseModel, Generic[T]):
    """Standard success response"""
    success: bool = True
    message: str = "Operation completed successfully"
    data: Optional[T] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "success": True,
            "message": "Person added successfully",
            "data": {"id": "5f0c2a"}
        }
    })


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "healthy"
    service: str = "personbase-api"
    version: str = "0.1.0"
    timestamp: str
    storage: str = "connected"
