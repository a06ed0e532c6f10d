from datetime import date

import pytest
from fastapi.testclient import TestClient

from personbase.api.routes.deps import get_manager
from personbase.db.database import MemoryStorage, set_storage
from personbase.db.repositories import ContentsRepository
from personbase.main import app
from personbase.models.person import PersonDraft
from personbase.services.database_manager import DatabaseManager
from personbase.services.record_store import RecordStore

TODAY = date(2024, 6, 15)


def make_draft(dni="30111222", given_name="Ana", family_name="García", birth_date="1990-05-10", **extra):
    return PersonDraft(dni=dni, given_name=given_name, family_name=family_name, birth_date=birth_date, **extra)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def contents_repository(storage):
    return ContentsRepository(storage)


@pytest.fixture
def store(contents_repository):
    return RecordStore("db1", contents_repository, max_persons=2000)


@pytest.fixture
def manager(storage):
    return DatabaseManager(storage=storage, max_persons=2000, confirmation_ttl_minutes=10)


@pytest.fixture
async def database(manager):
    return await manager.create_database("Club", "Members", "a1", "e1", "r1")


@pytest.fixture
def client(storage, manager):
    set_storage(storage)
    app.dependency_overrides[get_manager] = lambda: manager
    yield TestClient(app)
    app.dependency_overrides.clear()
    set_storage(None)
