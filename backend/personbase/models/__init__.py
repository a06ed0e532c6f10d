from .custom_field import CustomFieldDef, CustomValue, FieldKind
from .person import PersonDraft, PersonRecord, calculate_age
from .database import DatabaseContents, DatabaseRecord

__all__ = [
    "CustomFieldDef",
    "CustomValue",
    "FieldKind",
    "PersonDraft",
    "PersonRecord",
    "calculate_age",
    "DatabaseContents",
    "DatabaseRecord"
]
