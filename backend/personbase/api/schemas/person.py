from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from personbase.models.custom_field import CustomFieldDef, FieldKind
from personbase.models.person import PersonDraft, PersonRecord


class PersonWrite(BaseModel):
    """Person data as entered in the form; rule checks happen in the record validator"""
    dni: str = ""
    given_name: str = ""
    family_name: str = ""
    birth_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    address: str = ""
    phone: str = ""
    email: str = ""
    custom_values: Dict[str, Any] = Field(default_factory=dict, description="Values keyed by custom field id")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "dni": "30111222",
            "given_name": "Ana",
            "family_name": "García",
            "birth_date": "1990-05-10",
            "email": "ana@example.com",
            "custom_values": {"phone": "555-0101"}
        }
    })

    def to_draft(self) -> PersonDraft:
        return PersonDraft(**self.model_dump())


class PersonResponse(BaseModel):
    id: str
    dni: str
    given_name: str
    family_name: str
    birth_date: date
    age: int
    address: str
    phone: str
    email: str
    custom_values: Dict[str, Any]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: PersonRecord) -> "PersonResponse":
        return cls(
            id=record.id,
            dni=record.dni,
            given_name=record.given_name,
            family_name=record.family_name,
            birth_date=record.birth_date,
            age=record.age,
            address=record.address,
            phone=record.phone,
            email=record.email,
            custom_values={k: v.to_json() for k, v in record.custom_values.items()},
            created_at=record.created_at,
            updated_at=record.updated_at
        )


class PersonListResponse(BaseModel):
    persons: List[PersonResponse]
    total: int
    matched: int


class CustomFieldCreate(BaseModel):
    name: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False


class CustomFieldUpdate(BaseModel):
    name: Optional[str] = None
    kind: Optional[FieldKind] = None
    required: Optional[bool] = None


class CustomFieldMove(BaseModel):
    direction: str = Field(..., pattern="^(up|down)$")


class CustomFieldResponse(BaseModel):
    id: str
    name: str
    kind: FieldKind
    required: bool
    order: int

    @classmethod
    def from_field(cls, field: CustomFieldDef) -> "CustomFieldResponse":
        return cls(id=field.id, name=field.name, kind=field.kind, required=field.required, order=field.order)
