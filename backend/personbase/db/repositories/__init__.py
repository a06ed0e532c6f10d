from .registry_repository import RegistryRepository
from .contents_repository import ContentsRepository

__all__ = [
    "RegistryRepository",
    "ContentsRepository"
]
