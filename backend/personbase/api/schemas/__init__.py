from .common import (
    SuccessResponse,
    HealthResponse
)
from .database import (
    DatabaseCreate,
    DatabaseUpdate,
    DatabaseResponse,
    AccessRequest,
    EditRequest,
    RecoveryRequest,
    RecoveredCredentialsResponse,
    PendingConfirmationResponse
)
from .person import (
    PersonWrite,
    PersonResponse,
    PersonListResponse,
    CustomFieldCreate,
    CustomFieldUpdate,
    CustomFieldMove,
    CustomFieldResponse
)

__all__ = [
    # Common schemas
    "SuccessResponse",
    "HealthResponse",

    # Database schemas
    "DatabaseCreate",
    "DatabaseUpdate",
    "DatabaseResponse",
    "AccessRequest",
    "EditRequest",
    "RecoveryRequest",
    "RecoveredCredentialsResponse",
    "PendingConfirmationResponse",

    # Person and custom field schemas
    "PersonWrite",
    "PersonResponse",
    "PersonListResponse",
    "CustomFieldCreate",
    "CustomFieldUpdate",
    "CustomFieldMove",
    "CustomFieldResponse"
]
