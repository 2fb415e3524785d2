import pytest_asyncio

from infrastructure.cache.local_store import LocalStore
from infrastructure.persistence import Database, KeyValueStore


@pytest_asyncio.fixture
async def database(tmp_path):
    db = await Database.open(f"sqlite+aiosqlite:///{tmp_path / 'fxnow.db'}")
    yield db
    await db.close()


@pytest_asyncio.fixture
async def kv_store(database):
    return await KeyValueStore.create(database)


@pytest_asyncio.fixture
async def local_store(kv_store):
    return LocalStore(kv_store)
