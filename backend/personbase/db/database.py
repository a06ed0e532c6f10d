import os
import logging
from datetime import datetime
from typing import Dict, List, Optional, Protocol

import aiosqlite

from personbase.core.config import settings
from personbase.db.schema import ALL_TABLES, INDEXES

logger = logging.getLogger(__name__)


class StoragePort(Protocol):
    """Synchronous-in-effect string-keyed storage surface"""

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def keys(self, prefix: str = "") -> List[str]: ...


class SQLiteStorage:
    """Key-value storage backed by a single SQLite table"""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or settings.STORAGE_PATH
        self._connection: Optional[aiosqlite.Connection] = None

    async def connect(self):
        """Open the connection and create the table on first use"""
        if self._connection:
            return
        if self.db_path != ":memory:":
            directory = os.path.dirname(self.db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row
        for table_sql in ALL_TABLES:
            await self._connection.execute(table_sql)
        for index_sql in INDEXES:
            await self._connection.execute(index_sql)
        await self._connection.commit()
        logger.info(f"Storage opened at {self.db_path}")

    async def disconnect(self):
        """Close database connection"""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def _conn(self) -> aiosqlite.Connection:
        if not self._connection:
            await self.connect()
        return self._connection

    async def get(self, key: str) -> Optional[str]:
        conn = await self._conn()
        cursor = await conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = await cursor.fetchone()
        return row["value"] if row else None

    async def set(self, key: str, value: str):
        conn = await self._conn()
        await conn.execute(
            """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
               ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at""",
            (key, value, datetime.now().isoformat())
        )
        await conn.commit()

    async def remove(self, key: str):
        conn = await self._conn()
        await conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        await conn.commit()

    async def keys(self, prefix: str = "") -> List[str]:
        conn = await self._conn()
        cursor = await conn.execute(
            "SELECT key FROM kv_store WHERE substr(key, 1, ?) = ? ORDER BY key",
            (len(prefix), prefix)
        )
        rows = await cursor.fetchall()
        return [row["key"] for row in rows]


class MemoryStorage:
    """In-process storage with the same contract, used by tests"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def connect(self):
        return None

    async def disconnect(self):
        return None

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str):
        self.data[key] = value

    async def remove(self, key: str):
        self.data.pop(key, None)

    async def keys(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self.data if k.startswith(prefix))


# Global storage instance
_storage: Optional[StoragePort] = None


def get_storage() -> StoragePort:
    """Get the process-wide storage instance"""
    global _storage
    if _storage is None:
        _storage = SQLiteStorage()
    return _storage


def set_storage(storage: Optional[StoragePort]):
    """Replace the process-wide storage instance (used at start-up and in tests)"""
    global _storage
    _storage = storage
