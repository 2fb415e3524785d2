# nosec B101


from contextlib import asynccontextmanager

import pytest
from sqlalchemy.exc import OperationalError

from infrastructure.persistence import KeyValueStore
from infrastructure.persistence.models.key_value import KeyValueDB


@pytest.mark.asyncio
async def test_set_is_readable_immediately(kv_store):
    await kv_store.set("locale", "fr")

    assert kv_store.get("locale") == "fr"
    assert kv_store.contains("locale")


@pytest.mark.asyncio
async def test_values_survive_reload(database, kv_store):
    await kv_store.set("auto_refresh", False)
    await kv_store.set("favorites", ["EUR", "GBP"])
    await kv_store.set("rate_USD_EUR_timestamp", 1705312800000)

    reloaded = await KeyValueStore.create(database)

    assert reloaded.get("auto_refresh") is False
    assert reloaded.get("favorites") == ["EUR", "GBP"]
    assert reloaded.get("rate_USD_EUR_timestamp") == 1705312800000


@pytest.mark.asyncio
async def test_overwrite_keeps_single_row(database, kv_store):
    await kv_store.set("theme", "dark")
    await kv_store.set("theme", "light")

    reloaded = await KeyValueStore.create(database)

    assert reloaded.get("theme") == "light"
    assert reloaded.keys() == ["theme"]


@pytest.mark.asyncio
async def test_remove_deletes_from_memory_and_disk(database, kv_store):
    await kv_store.set("a", 1)
    await kv_store.set("b", 2)
    await kv_store.set("c", 3)

    await kv_store.remove("a", "b")

    assert kv_store.keys() == ["c"]
    reloaded = await KeyValueStore.create(database)
    assert reloaded.keys() == ["c"]


@pytest.mark.asyncio
async def test_clear_removes_everything(database, kv_store):
    await kv_store.set("a", 1)
    await kv_store.set("b", 2)

    await kv_store.clear()

    assert kv_store.keys() == []
    assert (await KeyValueStore.create(database)).keys() == []


@pytest.mark.asyncio
async def test_undecodable_row_is_skipped_on_load(database, kv_store):
    await kv_store.set("locale", "en")
    async with database.session() as session:
        session.add(KeyValueDB(key="broken", value="{ not json"))

    reloaded = await KeyValueStore.create(database)

    assert reloaded.get("locale") == "en"
    assert not reloaded.contains("broken")


def test_get_returns_default_for_missing_key():
    store = KeyValueStore(database=None)

    assert store.get("missing") is None
    assert store.get("missing", "fallback") == "fallback"


class FailingDatabase:
    @asynccontextmanager
    async def session(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))
        yield


@pytest.mark.asyncio
async def test_failed_write_leaves_mirror_untouched():
    store = KeyValueStore(FailingDatabase(), {"theme": "dark", "locale": "en"})

    with pytest.raises(OperationalError):
        await store.set("theme", "light")
    with pytest.raises(OperationalError):
        await store.set_many({"rate_USD_EUR": "{}", "rate_USD_EUR_timestamp": 1})
    with pytest.raises(OperationalError):
        await store.remove("locale")
    with pytest.raises(OperationalError):
        await store.clear()

    assert store.get("theme") == "dark"
    assert store.get("locale") == "en"
    assert not store.contains("rate_USD_EUR")
    assert not store.contains("rate_USD_EUR_timestamp")


@pytest.mark.asyncio
async def test_set_many_commits_all_keys(database, kv_store):
    await kv_store.set_many({"rate_USD_EUR": "{}", "rate_USD_EUR_timestamp": 1705312800000})

    reloaded = await KeyValueStore.create(database)

    assert reloaded.get("rate_USD_EUR") == "{}"
    assert reloaded.get("rate_USD_EUR_timestamp") == 1705312800000
