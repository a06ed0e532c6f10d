import uuid
from typing import List, Optional

from personbase.core.labels import get_labels
from personbase.models.custom_field import CustomFieldDef, FieldKind
from .exceptions import FieldError, FieldNameConflict, NotFound, ValidationFailed

DEFAULT_FIELD_IDS = ("address", "phone", "email")


def default_schema(locale: Optional[str] = None) -> List[CustomFieldDef]:
    """Contact fields every new database starts with"""
    labels = get_labels(locale)
    return [
        CustomFieldDef(id=field_id, name=labels[field_id], kind=FieldKind.TEXT, required=False, order=index)
        for index, field_id in enumerate(DEFAULT_FIELD_IDS)
    ]


class SchemaRegistry:
    """Ordered custom field definitions of one database"""

    def __init__(self, fields: Optional[List[CustomFieldDef]] = None):
        self._fields: List[CustomFieldDef] = sorted(fields or [], key=lambda f: f.order)

    @property
    def fields(self) -> List[CustomFieldDef]:
        return list(self._fields)

    def get(self, field_id: str) -> Optional[CustomFieldDef]:
        return next((f for f in self._fields if f.id == field_id), None)

    def _require(self, field_id: str) -> CustomFieldDef:
        field = self.get(field_id)
        if field is None:
            raise NotFound("Custom field", field_id)
        return field

    def _check_name(self, name: str, exclude_id: Optional[str] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationFailed([FieldError("name", "required", "The field name is required")])
        lowered = name.lower()
        if any(f.name.lower() == lowered and f.id != exclude_id for f in self._fields):
            raise FieldNameConflict(name)
        return name

    def add(self, name: str, kind: FieldKind = FieldKind.TEXT, required: bool = False) -> CustomFieldDef:
        """Append a new field at the end of the order"""
        name = self._check_name(name)
        field = CustomFieldDef(
            id=uuid.uuid4().hex,
            name=name,
            kind=FieldKind(kind),
            required=required,
            order=len(self._fields)
        )
        self._fields.append(field)
        return field

    def update(
        self,
        field_id: str,
        name: Optional[str] = None,
        kind: Optional[FieldKind] = None,
        required: Optional[bool] = None
    ) -> CustomFieldDef:
        """Edit a field in place; the name check ignores the field itself"""
        field = self._require(field_id)
        new_name = self._check_name(name, exclude_id=field_id) if name is not None else field.name
        new_kind = FieldKind(kind) if kind is not None else field.kind
        field.name = new_name
        field.kind = new_kind
        if required is not None:
            field.required = required
        return field

    def remove(self, field_id: str):
        """Drop a field; values already stored for it are left in place"""
        field = self._require(field_id)
        self._fields.remove(field)
        self._renumber()

    def reorder(self, field_id: str, direction: str):
        """Swap a field with its neighbour; moving past either end does nothing"""
        if direction not in ("up", "down"):
            raise ValueError(f"Invalid direction: {direction}")
        field = self._require(field_id)
        index = self._fields.index(field)
        target = index - 1 if direction == "up" else index + 1
        if target < 0 or target >= len(self._fields):
            return
        self._fields[index], self._fields[target] = self._fields[target], self._fields[index]
        self._renumber()

    def _renumber(self):
        for index, field in enumerate(self._fields):
            field.order = index
