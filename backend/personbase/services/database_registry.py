import uuid
import logging
from typing import List, Optional

from personbase.db.database import StoragePort
from personbase.db.repositories import ContentsRepository, RegistryRepository
from personbase.models.database import DatabaseContents, DatabaseRecord
from .exceptions import FieldError, NotFound, ValidationFailed
from .schema_registry import default_schema

logger = logging.getLogger(__name__)

# Metadata attributes that are mandatory, with their wire names
REQUIRED_METADATA = {
    "name": "name",
    "access_password": "accessPassword",
    "edit_password": "editPassword",
    "recovery_key": "recoveryKey",
}
EDITABLE_METADATA = ("name", "description", "access_password", "edit_password", "recovery_key")


def _check_required(values: dict):
    errors = [
        FieldError(wire, "required", f"{wire} is required")
        for attr, wire in REQUIRED_METADATA.items()
        if not (values.get(attr) or "").strip()
    ]
    if errors:
        raise ValidationFailed(errors)


class DatabaseRegistry:
    """Service for the top-level list of databases and their credentials"""

    def __init__(
        self,
        storage: Optional[StoragePort] = None,
        registry_repository: Optional[RegistryRepository] = None,
        contents_repository: Optional[ContentsRepository] = None
    ):
        self.registry = registry_repository or RegistryRepository(storage)
        self.contents = contents_repository or ContentsRepository(storage)

    async def list(self) -> List[DatabaseRecord]:
        """All databases in creation order"""
        return await self.registry.load()

    async def get(self, database_id: str) -> Optional[DatabaseRecord]:
        databases = await self.registry.load()
        return next((db for db in databases if db.id == database_id), None)

    async def require(self, database_id: str) -> DatabaseRecord:
        database = await self.get(database_id)
        if database is None:
            raise NotFound("Database", database_id)
        return database

    async def create_database(
        self,
        name: str,
        description: str,
        access_password: str,
        edit_password: str,
        recovery_key: str,
        locale: Optional[str] = None
    ) -> DatabaseRecord:
        """Register a new database with an empty store and the default contact fields"""
        _check_required({
            "name": name,
            "access_password": access_password,
            "edit_password": edit_password,
            "recovery_key": recovery_key,
        })
        database = DatabaseRecord(
            id=uuid.uuid4().hex,
            name=name.strip(),
            description=(description or "").strip(),
            access_password=access_password,
            edit_password=edit_password,
            recovery_key=recovery_key,
            person_count=0
        )
        await self.contents.save(database.id, DatabaseContents(schema=default_schema(locale), records=[]))
        databases = await self.registry.load()
        databases.append(database)
        await self.registry.save(databases)
        logger.info(f"Created database {database.id} ({database.name})")
        return database

    async def delete_database(self, database_id: str):
        """Remove the registry entry together with its contents"""
        databases = await self.registry.load()
        remaining = [db for db in databases if db.id != database_id]
        if len(remaining) == len(databases):
            raise NotFound("Database", database_id)
        await self.registry.save(remaining)
        await self.contents.remove(database_id)
        logger.info(f"Deleted database {database_id}")

    async def update_metadata(self, database_id: str, **patch) -> DatabaseRecord:
        """Apply a partial update to name, description or credentials"""
        unknown = set(patch) - set(EDITABLE_METADATA)
        if unknown:
            raise ValueError(f"Cannot update: {', '.join(sorted(unknown))}")
        databases = await self.registry.load()
        database = next((db for db in databases if db.id == database_id), None)
        if database is None:
            raise NotFound("Database", database_id)

        changes = {k: v for k, v in patch.items() if v is not None}
        merged = {attr: getattr(database, attr) for attr in EDITABLE_METADATA}
        merged.update(changes)
        _check_required(merged)

        for attr, value in changes.items():
            setattr(database, attr, value.strip() if attr in ("name", "description") else value)
        await self.registry.save(databases)
        logger.info(f"Updated metadata of database {database_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return database

    async def refresh_person_count(self, database_id: str, count: int):
        """Store the recount of a database's records in its registry entry"""
        databases = await self.registry.load()
        for database in databases:
            if database.id == database_id:
                if database.person_count != count:
                    database.person_count = count
                    await self.registry.save(databases)
                return
        raise NotFound("Database", database_id)

    async def append(self, entries: List[DatabaseRecord]):
        """Add already-built entries (import path)"""
        databases = await self.registry.load()
        databases.extend(entries)
        await self.registry.save(databases)
