"""
Record validation.

Every rule is checked and all violations are returned together, each tagged
with the field it concerns, so a form can show every problem at once. Field
tags use the wire names (``dni``, ``givenName``, ``familyName``,
``birthDate``, ``email``) and ``custom_<fieldId>`` for custom fields.
"""

import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from personbase.models.custom_field import CustomFieldDef, CustomValue, DATE_FORMAT, is_blank
from personbase.models.person import PersonDraft, PersonRecord
from .exceptions import FieldError

DNI_PATTERN = re.compile(r"^\d+$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def parse_birth_date(value: Any) -> Optional[date]:
    """Return the birth date as a ``date``; raises ValueError when malformed"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip(), DATE_FORMAT).date()


def parse_custom_values(
    raw_values: Dict[str, Any],
    schema: List[CustomFieldDef]
) -> Tuple[Dict[str, CustomValue], List[FieldError]]:
    """Type draft values against the schema; ids outside the schema are rejected"""
    fields = {f.id: f for f in schema}
    values: Dict[str, CustomValue] = {}
    errors: List[FieldError] = []
    for field_id, raw in (raw_values or {}).items():
        field = fields.get(field_id)
        if field is None:
            errors.append(FieldError(f"custom_{field_id}", "unknown", f"There is no custom field '{field_id}'"))
            continue
        if is_blank(raw):
            continue
        try:
            values[field_id] = CustomValue.parse(field.kind, raw)
        except ValueError:
            errors.append(FieldError(
                f"custom_{field_id}", "invalid",
                f"{field.name} must be a valid {field.kind.value}"
            ))
    return values, errors


class RecordValidator:
    """Checks person drafts against fixed rules and a custom schema"""

    def __init__(self, schema: List[CustomFieldDef], records: Iterable[PersonRecord] = ()):
        self.schema = schema
        self.records = records

    def is_dni_unique(self, dni: str, exclude_id: Optional[str] = None) -> bool:
        return not any(r.dni == dni and r.id != exclude_id for r in self.records)

    def validate(
        self,
        draft: PersonDraft,
        exclude_id: Optional[str] = None,
        today: Optional[date] = None
    ) -> List[FieldError]:
        """Return every violated rule; an empty list means the draft is valid"""
        today = today or date.today()
        errors: List[FieldError] = []

        if not draft.dni:
            errors.append(FieldError("dni", "required", "The DNI is required"))
        elif not DNI_PATTERN.match(draft.dni):
            errors.append(FieldError("dni", "digits_only", "The DNI must contain digits only"))
        elif not self.is_dni_unique(draft.dni, exclude_id):
            errors.append(FieldError("dni", "duplicate", "A person with this DNI already exists"))

        if not draft.given_name:
            errors.append(FieldError("givenName", "required", "The given name is required"))

        if not draft.family_name:
            errors.append(FieldError("familyName", "required", "The family name is required"))

        if draft.birth_date is None:
            errors.append(FieldError("birthDate", "required", "The birth date is required"))
        else:
            try:
                birth_date = parse_birth_date(draft.birth_date)
            except ValueError:
                errors.append(FieldError("birthDate", "invalid", "The birth date is not a valid date"))
            else:
                if birth_date > today:
                    errors.append(FieldError("birthDate", "future", "The birth date cannot be in the future"))

        if draft.email and not EMAIL_PATTERN.match(draft.email):
            errors.append(FieldError("email", "invalid", "The email format is not valid"))

        values, value_errors = parse_custom_values(draft.custom_values, self.schema)
        errors.extend(value_errors)
        invalid = {e.field for e in value_errors}
        for field in self.schema:
            tag = f"custom_{field.id}"
            if field.required and tag not in invalid:
                value = values.get(field.id)
                if value is None or value.is_empty():
                    errors.append(FieldError(tag, "required", f"{field.name} is required"))

        return errors
