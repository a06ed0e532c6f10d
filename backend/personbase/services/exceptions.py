"""
Domain errors raised by the record store, schema registry, registry,
access control and snapshot codec.

Every error carries a short ``title`` and an explanatory ``message`` so a UI
can show a distinct notification per condition, plus a stable ``code``.
"""

from dataclasses import dataclass, asdict
from typing import List, Optional, Dict, Any


@dataclass(frozen=True)
class FieldError:
    """A single violated rule, tagged with the field it applies to"""
    field: str
    code: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class PersonBaseError(Exception):
    """Base exception for all recoverable domain errors"""
    code = "PERSONBASE_ERROR"
    title = "Error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationFailed(PersonBaseError):
    code = "VALIDATION_FAILED"
    title = "Validation failed"

    def __init__(self, field_errors: List[FieldError], message: Optional[str] = None):
        self.field_errors = list(field_errors)
        fields = ", ".join(sorted({e.field for e in self.field_errors}))
        super().__init__(
            message or f"Invalid values for: {fields}",
            {"errors": [e.to_dict() for e in self.field_errors]}
        )

    def fields(self) -> List[str]:
        return [e.field for e in self.field_errors]


class CapacityExceeded(PersonBaseError):
    code = "CAPACITY_EXCEEDED"
    title = "Limit reached"

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Cannot add more than {limit} persons", {"limit": limit})


class NotFound(PersonBaseError):
    code = "NOT_FOUND"
    title = "Not found"

    def __init__(self, kind: str, identifier: Optional[str] = None, message: Optional[str] = None):
        self.kind = kind
        self.identifier = identifier
        if message is None:
            message = f"{kind} '{identifier}' not found" if identifier else f"{kind} not found"
        super().__init__(message, {"kind": kind, "id": identifier})


class FieldNameConflict(PersonBaseError):
    code = "FIELD_NAME_CONFLICT"
    title = "Duplicate field"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"A field named '{name}' already exists", {"name": name})


class AccessDenied(PersonBaseError):
    code = "ACCESS_DENIED"
    title = "Incorrect password"

    def __init__(self, message: str = "The password entered is not valid"):
        super().__init__(message)


class InvalidFormat(PersonBaseError):
    code = "INVALID_FORMAT"
    title = "Invalid file"

    def __init__(self, message: str = "The file is not valid or is corrupt"):
        super().__init__(message)
