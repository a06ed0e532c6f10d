import asyncio
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from personbase.core.config import settings
from personbase.db.database import StoragePort, get_storage
from personbase.models.custom_field import CustomFieldDef, FieldKind
from personbase.models.database import DatabaseRecord
from personbase.models.person import PersonDraft, PersonRecord
from . import snapshot_codec
from .access_control import AccessControl, RecoveredCredentials
from .confirmation_service import ConfirmationService, PendingAction, PendingConfirmation
from .database_registry import DatabaseRegistry
from .exceptions import NotFound
from .record_store import RecordStore

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Entry point used by the API: opens databases behind their access
    password, re-checks the edit password before every edit, and runs
    destructive actions in two phases (request, then confirm).

    Every operation that writes storage holds ``_storage_lock`` from its
    first read to its last write, so overlapping requests run one after
    the other instead of overwriting each other's documents.
    """

    def __init__(
        self,
        storage: Optional[StoragePort] = None,
        max_persons: Optional[int] = None,
        confirmation_ttl_minutes: Optional[int] = None
    ):
        self.storage = storage or get_storage()
        self.registry = DatabaseRegistry(self.storage)
        self.access = AccessControl()
        self.confirmations = ConfirmationService(confirmation_ttl_minutes)
        self.max_persons = max_persons if max_persons is not None else settings.MAX_PERSONS_PER_DATABASE
        self._storage_lock = asyncio.Lock()

    # Databases

    async def list_databases(self) -> List[DatabaseRecord]:
        return await self.registry.list()

    async def create_database(
        self,
        name: str,
        description: str,
        access_password: str,
        edit_password: str,
        recovery_key: str
    ) -> DatabaseRecord:
        async with self._storage_lock:
            return await self.registry.create_database(
                name, description, access_password, edit_password, recovery_key
            )

    async def _store(self, database_id: str) -> RecordStore:
        return await RecordStore.open(
            database_id,
            self.registry.contents,
            max_persons=self.max_persons,
            on_change=self.registry.refresh_person_count
        )

    async def _open(self, database_id: str, access_password: str) -> RecordStore:
        database = await self.registry.require(database_id)
        self.access.require_access(database, access_password)
        store = await self._store(database_id)
        # Resync the cached count with what is actually stored
        await self.registry.refresh_person_count(database_id, len(store))
        return store

    async def open_database(self, database_id: str, access_password: str) -> RecordStore:
        """Return the record store of a database once its access password checks out"""
        async with self._storage_lock:
            return await self._open(database_id, access_password)

    async def update_metadata(self, database_id: str, edit_password: str, **patch) -> DatabaseRecord:
        async with self._storage_lock:
            database = await self.registry.require(database_id)
            self.access.require_edit(database, edit_password)
            return await self.registry.update_metadata(database_id, **patch)

    async def request_database_delete(self, database_id: str, edit_password: str) -> PendingConfirmation:
        database = await self.registry.require(database_id)
        self.access.require_edit(database, edit_password)
        return self.confirmations.request(PendingAction.DELETE_DATABASE, database_id)

    async def recover_credentials(self, database_id: str, recovery_key: str) -> RecoveredCredentials:
        database = await self.registry.require(database_id)
        return self.access.recover_credentials(database, recovery_key)

    # Persons

    async def add_person(
        self,
        database_id: str,
        access_password: str,
        draft: PersonDraft,
        today: Optional[date] = None
    ) -> PersonRecord:
        async with self._storage_lock:
            store = await self._open(database_id, access_password)
            return await store.create(draft, today=today)

    async def update_person(
        self,
        database_id: str,
        person_id: str,
        edit_password: str,
        draft: PersonDraft,
        today: Optional[date] = None
    ) -> PersonRecord:
        async with self._storage_lock:
            database = await self.registry.require(database_id)
            self.access.require_edit(database, edit_password)
            store = await self._store(database_id)
            return await store.update(person_id, draft, today=today)

    async def request_person_delete(self, database_id: str, person_id: str, edit_password: str) -> PendingConfirmation:
        database = await self.registry.require(database_id)
        self.access.require_edit(database, edit_password)
        store = await self._store(database_id)
        if store.get(person_id) is None:
            raise NotFound("Person", person_id)
        return self.confirmations.request(PendingAction.DELETE_PERSON, database_id, person_id)

    # Custom fields

    async def add_field(
        self,
        database_id: str,
        access_password: str,
        name: str,
        kind: FieldKind = FieldKind.TEXT,
        required: bool = False
    ) -> CustomFieldDef:
        async with self._storage_lock:
            store = await self._open(database_id, access_password)
            return await store.add_field(name, kind, required)

    async def update_field(
        self,
        database_id: str,
        access_password: str,
        field_id: str,
        name: Optional[str] = None,
        kind: Optional[FieldKind] = None,
        required: Optional[bool] = None
    ) -> CustomFieldDef:
        async with self._storage_lock:
            store = await self._open(database_id, access_password)
            return await store.update_field(field_id, name=name, kind=kind, required=required)

    async def remove_field(self, database_id: str, access_password: str, field_id: str) -> List[CustomFieldDef]:
        """Remove a field and return the remaining schema"""
        async with self._storage_lock:
            store = await self._open(database_id, access_password)
            await store.remove_field(field_id)
            return store.schema.fields

    async def reorder_field(
        self,
        database_id: str,
        access_password: str,
        field_id: str,
        direction: str
    ) -> List[CustomFieldDef]:
        """Move a field one step and return the resulting schema"""
        async with self._storage_lock:
            store = await self._open(database_id, access_password)
            await store.reorder_field(field_id, direction)
            return store.schema.fields

    # Confirmation

    async def confirm(self, token: str) -> Dict[str, Any]:
        """Run a previously authorised destructive action"""
        async with self._storage_lock:
            pending = self.confirmations.consume(token)
            if pending.action is PendingAction.DELETE_PERSON:
                store = await self._store(pending.database_id)
                await store.delete(pending.person_id)
            elif pending.action is PendingAction.DELETE_DATABASE:
                await self.registry.delete_database(pending.database_id)
        return {
            "action": pending.action.value,
            "databaseId": pending.database_id,
            "personId": pending.person_id
        }

    # Snapshots

    async def export_database(self, database_id: str, access_password: str) -> bytes:
        async with self._storage_lock:
            store = await self._open(database_id, access_password)
            database = await self.registry.require(database_id)
        return snapshot_codec.export_database(database, store.contents())

    async def export_all(self) -> bytes:
        async with self._storage_lock:
            return await snapshot_codec.export_all(self.registry)

    async def import_all(self, blob: bytes) -> snapshot_codec.ImportResult:
        async with self._storage_lock:
            return await snapshot_codec.import_all(self.registry, blob)


# Singleton instance
_database_manager = None


def get_database_manager() -> DatabaseManager:
    """Get singleton DatabaseManager instance"""
    global _database_manager
    if _database_manager is None:
        _database_manager = DatabaseManager()
    return _database_manager
