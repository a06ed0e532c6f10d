from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .custom_field import CustomFieldDef, CustomValue, DATE_FORMAT


# Spanish keys found in older exports
LEGACY_PERSON_KEYS = {
    "nombre": "givenName",
    "apellido": "familyName",
    "fechaNacimiento": "birthDate",
    "edad": "age",
    "domicilio": "address",
    "telefono": "phone",
    "customFields": "customValues",
}


def calculate_age(birth_date: date, today: Optional[date] = None) -> int:
    """Whole years between ``birth_date`` and ``today``"""
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def decode_custom_values(raw_values: Dict[str, Any], schema: List[CustomFieldDef]) -> Dict[str, CustomValue]:
    """Type stored custom values against the current schema, keeping the rest verbatim"""
    kinds = {f.id: f.kind for f in schema}
    values = {}
    for field_id, raw in (raw_values or {}).items():
        kind = kinds.get(field_id)
        if kind is None:
            values[field_id] = CustomValue.verbatim(raw)
            continue
        try:
            values[field_id] = CustomValue.parse(kind, raw)
        except ValueError:
            values[field_id] = CustomValue.verbatim(raw)
    return values


@dataclass
class PersonDraft:
    """User-supplied person data before validation"""
    dni: str = ""
    given_name: str = ""
    family_name: str = ""
    birth_date: Any = None
    address: str = ""
    phone: str = ""
    email: str = ""
    custom_values: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        for name in ("dni", "given_name", "family_name", "address", "phone", "email"):
            value = getattr(self, name)
            setattr(self, name, (value or "").strip())
        if isinstance(self.birth_date, str):
            self.birth_date = self.birth_date.strip() or None


@dataclass
class PersonRecord:
    """Person stored in one database's record store"""
    id: str
    dni: str
    given_name: str
    family_name: str
    birth_date: date
    age: int
    address: str = ""
    phone: str = ""
    email: str = ""
    custom_values: Dict[str, CustomValue] = field(default_factory=dict)
    created_at: datetime = None
    updated_at: datetime = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.now()
        if self.updated_at is None:
            self.updated_at = self.created_at

    @property
    def full_name(self) -> str:
        return f"{self.given_name} {self.family_name}".strip()

    def to_dict(self):
        """Convert to dictionary for storage and export"""
        return {
            "id": self.id,
            "dni": self.dni,
            "givenName": self.given_name,
            "familyName": self.family_name,
            "birthDate": self.birth_date.strftime(DATE_FORMAT),
            "age": self.age,
            "address": self.address,
            "phone": self.phone,
            "email": self.email,
            "customValues": {k: v.to_json() for k, v in self.custom_values.items()},
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat()
        }

    @classmethod
    def from_dict(cls, data: dict, schema: List[CustomFieldDef]):
        """Create PersonRecord from a stored dictionary"""
        data = {LEGACY_PERSON_KEYS.get(k, k): v for k, v in data.items()}
        birth_date = datetime.strptime(data["birthDate"][:10], DATE_FORMAT).date()
        created_at = datetime.fromisoformat(data["createdAt"])
        return cls(
            id=str(data["id"]),
            dni=str(data["dni"]),
            given_name=data["givenName"],
            family_name=data["familyName"],
            birth_date=birth_date,
            age=int(data.get("age", calculate_age(birth_date))),
            address=data.get("address") or "",
            phone=data.get("phone") or "",
            email=data.get("email") or "",
            custom_values=decode_custom_values(data.get("customValues") or {}, schema),
            created_at=created_at,
            updated_at=datetime.fromisoformat(data["updatedAt"]) if data.get("updatedAt") else created_at
        )
