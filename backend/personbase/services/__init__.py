from .exceptions import (
    PersonBaseError,
    FieldError,
    ValidationFailed,
    CapacityExceeded,
    NotFound,
    FieldNameConflict,
    AccessDenied,
    InvalidFormat
)
from .schema_registry import SchemaRegistry, default_schema
from .record_validator import RecordValidator
from .record_store import RecordStore
from .database_registry import DatabaseRegistry
from .access_control import AccessControl, RecoveredCredentials
from .confirmation_service import ConfirmationService, PendingAction, PendingConfirmation
from .database_manager import DatabaseManager, get_database_manager

__all__ = [
    "PersonBaseError",
    "FieldError",
    "ValidationFailed",
    "CapacityExceeded",
    "NotFound",
    "FieldNameConflict",
    "AccessDenied",
    "InvalidFormat",
    "SchemaRegistry",
    "default_schema",
    "RecordValidator",
    "RecordStore",
    "DatabaseRegistry",
    "AccessControl",
    "RecoveredCredentials",
    "ConfirmationService",
    "PendingAction",
    "PendingConfirmation",
    "DatabaseManager",
    "get_database_manager"
]
