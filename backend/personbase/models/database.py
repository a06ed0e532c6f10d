from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .custom_field import CustomFieldDef
from .person import PersonRecord


@dataclass
class DatabaseRecord:
    """Registry entry describing one database and its credentials"""
    id: str
    name: str
    description: str = ""
    access_password: str = ""
    edit_password: str = ""
    recovery_key: str = ""
    created_at: Optional[datetime] = None
    person_count: int = 0

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.now()

    def to_dict(self):
        """Convert to dictionary for storage and export"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "accessPassword": self.access_password,
            "editPassword": self.edit_password,
            "recoveryKey": self.recovery_key,
            "createdAt": self.created_at.isoformat(),
            "personCount": self.person_count
        }

    @classmethod
    def from_dict(cls, data: dict):
        """Create DatabaseRecord from a stored dictionary"""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description") or "",
            # Older exports call the access password just "password"
            access_password=data["accessPassword"] if "accessPassword" in data else data["password"],
            edit_password=data["editPassword"],
            recovery_key=data["recoveryKey"],
            created_at=datetime.fromisoformat(data["createdAt"]) if data.get("createdAt") else None,
            person_count=int(data.get("personCount", 0))
        )


@dataclass
class DatabaseContents:
    """Persisted unit of one database: ordered schema plus its records"""
    schema: List[CustomFieldDef] = field(default_factory=list)
    records: List[PersonRecord] = field(default_factory=list)

    def to_dict(self):
        return {
            "schema": [f.to_dict() for f in self.schema],
            "records": [r.to_dict() for r in self.records]
        }

    @classmethod
    def from_dict(cls, data: dict):
        """Create DatabaseContents, typing record values against the stored schema"""
        if not isinstance(data, dict):
            raise ValueError("Database contents must be an object")
        schema = [CustomFieldDef.from_dict(f) for f in data.get("schema", data.get("customFields", []))]
        schema.sort(key=lambda f: f.order)
        records = [
            PersonRecord.from_dict(r, schema)
            for r in data.get("records", data.get("persons", []))
        ]
        return cls(schema=schema, records=records)
