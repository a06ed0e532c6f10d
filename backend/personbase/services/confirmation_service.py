import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Optional

from personbase.core.config import settings
from .exceptions import NotFound


class PendingAction(str, Enum):
    DELETE_PERSON = "delete_person"
    DELETE_DATABASE = "delete_database"


@dataclass
class PendingConfirmation:
    """A destructive action authorised by the edit password, awaiting confirmation"""
    token: str
    action: PendingAction
    database_id: str
    person_id: Optional[str]
    created_at: datetime
    expires_at: datetime

    def to_dict(self):
        return {
            "token": self.token,
            "action": self.action.value,
            "databaseId": self.database_id,
            "personId": self.person_id,
            "expiresAt": self.expires_at.isoformat()
        }


class ConfirmationService:
    """In-memory single-use tokens for two-phase destructive actions"""

    def __init__(self, ttl_minutes: Optional[int] = None):
        self.pending: Dict[str, PendingConfirmation] = {}
        self.ttl = timedelta(minutes=ttl_minutes if ttl_minutes is not None else settings.CONFIRMATION_TTL_MINUTES)

    def request(self, action: PendingAction, database_id: str, person_id: Optional[str] = None) -> PendingConfirmation:
        """Register a pending action; the caller has already checked the edit password"""
        self.cleanup_expired()
        now = datetime.now()
        pending = PendingConfirmation(
            token=uuid.uuid4().hex,
            action=action,
            database_id=database_id,
            person_id=person_id,
            created_at=now,
            expires_at=now + self.ttl
        )
        self.pending[pending.token] = pending
        return pending

    def consume(self, token: str) -> PendingConfirmation:
        """Take a pending action out; each token can be used once"""
        pending = self.pending.pop(token, None)
        if pending is None or datetime.now() > pending.expires_at:
            raise NotFound("Pending confirmation", token)
        return pending

    def cancel(self, token: str) -> bool:
        return self.pending.pop(token, None) is not None

    def cleanup_expired(self) -> int:
        now = datetime.now()
        expired = [token for token, p in self.pending.items() if now > p.expires_at]
        for token in expired:
            del self.pending[token]
        return len(expired)
