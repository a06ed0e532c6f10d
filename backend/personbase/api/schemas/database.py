from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from personbase.models.database import DatabaseRecord


class DatabaseCreate(BaseModel):
    """Request model for creating a database"""
    name: str = Field(..., description="Database name")
    description: str = Field("", description="Free-text description")
    access_password: str = Field(..., description="Password required to open the database")
    edit_password: str = Field(..., description="Password required to edit or delete")
    recovery_key: str = Field(..., description="Key that discloses both passwords")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "name": "Club members",
            "description": "Members registered in 2024",
            "access_password": "a1",
            "edit_password": "e1",
            "recovery_key": "r1"
        }
    })


class DatabaseUpdate(BaseModel):
    """Partial metadata update; omitted fields are left unchanged"""
    name: Optional[str] = None
    description: Optional[str] = None
    access_password: Optional[str] = None
    edit_password: Optional[str] = None
    recovery_key: Optional[str] = None


class DatabaseResponse(BaseModel):
    """Registry entry without credentials"""
    id: str
    name: str
    description: str
    created_at: datetime
    person_count: int

    @classmethod
    def from_record(cls, database: DatabaseRecord) -> "DatabaseResponse":
        return cls(
            id=database.id,
            name=database.name,
            description=database.description,
            created_at=database.created_at,
            person_count=database.person_count
        )


class AccessRequest(BaseModel):
    access_password: str


class EditRequest(BaseModel):
    edit_password: str


class RecoveryRequest(BaseModel):
    recovery_key: str


class RecoveredCredentialsResponse(BaseModel):
    access_password: str
    edit_password: str


class PendingConfirmationResponse(BaseModel):
    token: str
    action: str
    database_id: str
    person_id: Optional[str] = None
    expires_at: datetime

    @classmethod
    def from_pending(cls, pending) -> "PendingConfirmationResponse":
        return cls(
            token=pending.token,
            action=pending.action.value,
            database_id=pending.database_id,
            person_id=pending.person_id,
            expires_at=pending.expires_at
        )
