from .database import StoragePort, SQLiteStorage, MemoryStorage, get_storage, set_storage
from .repositories import RegistryRepository, ContentsRepository

__all__ = [
    "StoragePort",
    "SQLiteStorage",
    "MemoryStorage",
    "get_storage",
    "set_storage",
    "RegistryRepository",
    "ContentsRepository"
]
