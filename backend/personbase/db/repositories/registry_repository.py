import json
from typing import List, Optional

from personbase.core.config import settings
from personbase.db.database import StoragePort, get_storage
from personbase.models.database import DatabaseRecord


class RegistryRepository:
    """Repository for the top-level list of databases"""

    def __init__(self, storage: Optional[StoragePort] = None, key: Optional[str] = None):
        self.storage = storage or get_storage()
        self.key = key or settings.REGISTRY_KEY

    async def load(self) -> List[DatabaseRecord]:
        """Load every registry entry in stored order"""
        raw = await self.storage.get(self.key)
        if not raw:
            return []
        return [DatabaseRecord.from_dict(item) for item in json.loads(raw)]

    async def save(self, databases: List[DatabaseRecord]):
        """Replace the whole registry in one write"""
        await self.storage.set(
            self.key,
            json.dumps([db.to_dict() for db in databases], ensure_ascii=False)
        )
