import json
from typing import Any, Dict, List, Optional

from personbase.core.config import settings
from personbase.db.database import StoragePort, get_storage
from personbase.models.database import DatabaseContents


class ContentsRepository:
    """Repository for per-database schema and records"""

    def __init__(self, storage: Optional[StoragePort] = None, prefix: Optional[str] = None):
        self.storage = storage or get_storage()
        self.prefix = prefix if prefix is not None else settings.CONTENTS_KEY_PREFIX

    def key_for(self, database_id: str) -> str:
        return f"{self.prefix}{database_id}"

    async def load_raw(self, database_id: str) -> Optional[Dict[str, Any]]:
        """Stored JSON document for a database, untouched"""
        raw = await self.storage.get(self.key_for(database_id))
        return json.loads(raw) if raw else None

    async def load(self, database_id: str) -> Optional[DatabaseContents]:
        data = await self.load_raw(database_id)
        return DatabaseContents.from_dict(data) if data is not None else None

    async def save(self, database_id: str, contents: DatabaseContents):
        await self.save_raw(database_id, contents.to_dict())

    async def save_raw(self, database_id: str, data: Dict[str, Any]):
        """Store a JSON document verbatim (import path)"""
        await self.storage.set(self.key_for(database_id), json.dumps(data, ensure_ascii=False))

    async def remove(self, database_id: str):
        await self.storage.remove(self.key_for(database_id))

    async def list_ids(self) -> List[str]:
        keys = await self.storage.keys(self.prefix)
        return [k[len(self.prefix):] for k in keys]
