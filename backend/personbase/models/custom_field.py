import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union


class FieldKind(str, Enum):
    """Value kinds a custom field can hold."""
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"


NUMBER_PATTERN = re.compile(r"^-?\d+(\.\d{1,2})?$")
DATE_FORMAT = "%Y-%m-%d"


@dataclass
class CustomFieldDef:
    """Custom field definition owned by one database's schema"""
    id: str
    name: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    order: int = 0

    def __post_init__(self):
        if not isinstance(self.kind, FieldKind):
            self.kind = FieldKind(self.kind)

    def to_dict(self):
        """Convert to dictionary for storage and export"""
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "required": self.required,
            "order": self.order
        }

    @classmethod
    def from_dict(cls, data: dict):
        """Create CustomFieldDef from a stored dictionary"""
        # Older exports call the kind "type"
        kind = data.get("kind", data.get("type", FieldKind.TEXT.value))
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            kind=FieldKind(kind),
            required=bool(data.get("required", False)),
            order=int(data.get("order", 0))
        )


RawValue = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class CustomValue:
    """
    Tagged custom-field value.

    ``kind`` is the tag; ``value`` is a ``str`` for text, a ``Decimal`` for
    number, a ``date`` for date and a ``bool`` for boolean. A ``kind`` of
    ``None`` marks a value kept verbatim because its field no longer exists
    or no longer accepts it.
    """
    kind: Optional[FieldKind]
    value: Any

    @classmethod
    def parse(cls, kind: FieldKind, raw: Any) -> "CustomValue":
        """Parse a raw value for ``kind``; raises ValueError when malformed"""
        if kind is FieldKind.TEXT:
            if not isinstance(raw, str):
                raise ValueError("Expected text")
            return cls(kind, raw)

        if kind is FieldKind.NUMBER:
            if isinstance(raw, bool) or not isinstance(raw, (str, int, float, Decimal)):
                raise ValueError("Expected a number")
            text = str(raw).strip()
            if not NUMBER_PATTERN.match(text):
                raise ValueError("Expected a number with at most two decimals")
            return cls(kind, Decimal(text))

        if kind is FieldKind.DATE:
            if isinstance(raw, datetime):
                return cls(kind, raw.date())
            if isinstance(raw, date):
                return cls(kind, raw)
            if not isinstance(raw, str):
                raise ValueError("Expected a date")
            return cls(kind, datetime.strptime(raw.strip(), DATE_FORMAT).date())

        if kind is FieldKind.BOOLEAN:
            if isinstance(raw, bool):
                return cls(kind, raw)
            if isinstance(raw, str) and raw.strip().lower() in ("true", "false"):
                return cls(kind, raw.strip().lower() == "true")
            raise ValueError("Expected true or false")

        raise ValueError(f"Unknown field kind: {kind}")

    @classmethod
    def verbatim(cls, raw: RawValue) -> "CustomValue":
        return cls(None, raw)

    def is_empty(self) -> bool:
        if self.kind is FieldKind.BOOLEAN:
            return False
        if self.value is None:
            return True
        if isinstance(self.value, str):
            return not self.value.strip()
        return False

    def to_json(self) -> RawValue:
        """Encode for JSON storage"""
        if self.kind is FieldKind.NUMBER:
            return str(self.value)
        if self.kind is FieldKind.DATE:
            return self.value.strftime(DATE_FORMAT)
        return self.value


def is_blank(raw: Any) -> bool:
    """True for values a form leaves behind when nothing was entered"""
    return raw is None or (isinstance(raw, str) and not raw.strip())
