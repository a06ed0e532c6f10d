import logging
import secrets
from dataclasses import dataclass

from personbase.models.database import DatabaseRecord
from .exceptions import AccessDenied

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecoveredCredentials:
    access_password: str
    edit_password: str


def _matches(supplied: str, stored: str) -> bool:
    # Credentials are kept as entered, so this is a plain comparison
    return secrets.compare_digest((supplied or "").encode("utf-8"), (stored or "").encode("utf-8"))


class AccessControl:
    """Password, edit-password and recovery-key checks for a database"""

    def authenticate_access(self, database: DatabaseRecord, password: str) -> bool:
        granted = _matches(password, database.access_password)
        if not granted:
            logger.warning(f"Access denied to database {database.id}")
        return granted

    def authenticate_edit(self, database: DatabaseRecord, password: str) -> bool:
        granted = _matches(password, database.edit_password)
        if not granted:
            logger.warning(f"Edit denied on database {database.id}")
        return granted

    def require_access(self, database: DatabaseRecord, password: str):
        if not self.authenticate_access(database, password):
            raise AccessDenied("The database password is not valid")

    def require_edit(self, database: DatabaseRecord, password: str):
        if not self.authenticate_edit(database, password):
            raise AccessDenied("The edit password is not valid")

    def recover_credentials(self, database: DatabaseRecord, recovery_key: str) -> RecoveredCredentials:
        """Disclose both passwords to the holder of the recovery key"""
        if not _matches(recovery_key, database.recovery_key):
            logger.warning(f"Recovery denied for database {database.id}")
            raise AccessDenied("The recovery key is not valid")
        logger.info(f"Credentials recovered for database {database.id}")
        return RecoveredCredentials(
            access_password=database.access_password,
            edit_password=database.edit_password
        )
