# tests/test_delete.py

from datetime import timedelta

import pytest
from sqlalchemy import text

from zonestore.core.errors import InvalidIDError, StoreConnectionError
from zonestore.models.record_schema import Record
from zonestore.services.zone_store import ZoneStore
from zonestore.storage.db import ConnectionManager

ZONE = "example.com"


async def seed(store, *values):
    records = [Record(type="A", name=f"host{i}", value=value, ttl=timedelta(seconds=60)) for i, value in enumerate(values)]
    return (await store.append(ZONE, records)).raise_for_error()


@pytest.mark.asyncio
async def test_delete_by_id(store):
    kept, removed = await seed(store, "192.0.2.1", "192.0.2.2")

    result = await store.delete(ZONE, [removed])

    assert result.ok
    assert result.records == [removed]
    remaining = (await store.list(ZONE)).raise_for_error()
    assert [r.id for r in remaining] == [kept.id]


@pytest.mark.asyncio
async def test_delete_skips_records_without_id(store):
    (stored,) = await seed(store, "192.0.2.1")
    unsaved = Record(type="A", name="host0", value="192.0.2.1", ttl=timedelta(seconds=60))

    result = await store.delete(ZONE, [unsaved, stored])

    assert result.ok
    assert result.records == [unsaved, stored]
    assert (await store.list(ZONE)).raise_for_error() == []


@pytest.mark.asyncio
async def test_delete_echoes_input_for_missing_rows(store):
    ghost = Record(id="424242", type="TXT", name="gone", value="x")

    result = await store.delete(ZONE, [ghost])

    assert result.ok
    assert result.records == [ghost]


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["abc", "12a", "1.5", " 7", "1_000", "99999999999999999999"])
async def test_delete_stops_at_invalid_id(store, bad_id):
    first, second = await seed(store, "192.0.2.1", "192.0.2.2")
    invalid = Record(id=bad_id, type="A", name="bad", value="192.0.2.9")

    result = await store.delete(ZONE, [first, invalid, second])

    assert isinstance(result.error, InvalidIDError)
    assert result.error.record_id == bad_id
    assert result.records == [first]
    remaining = (await store.list(ZONE)).raise_for_error()
    assert [r.id for r in remaining] == [second.id]


@pytest.mark.asyncio
async def test_delete_prefix_includes_skipped_records(store):
    (stored,) = await seed(store, "192.0.2.1")
    unsaved = Record(type="TXT", name="draft", value="not stored")
    invalid = Record(id="nope", type="TXT", name="bad", value="x")

    result = await store.delete(ZONE, [unsaved, invalid, stored])

    assert isinstance(result.error, InvalidIDError)
    assert result.records == [unsaved]
    assert len((await store.list(ZONE)).raise_for_error()) == 1


@pytest.mark.asyncio
async def test_delete_stops_at_query_failure(tmp_path, engine_factory):
    # No schema created, so the first real delete fails
    connections = ConnectionManager(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}", engine_factory=engine_factory)
    store = ZoneStore(connections=connections)
    unsaved = Record(type="TXT", name="draft", value="not stored")
    stored = Record(id="1", type="A", name="www", value="192.0.2.1")

    result = await store.delete(ZONE, [unsaved, stored])

    assert isinstance(result.error, StoreConnectionError)
    assert result.records == [unsaved]
    await store.close()


@pytest.mark.asyncio
async def test_delete_keeps_rows_removed_before_query_failure(store, connections):
    first, second = await seed(store, "192.0.2.1", "192.0.2.2")
    # A trigger makes the database refuse the second delete
    async with connections.session() as db:
        await db.execute(text("CREATE TRIGGER block_second BEFORE DELETE ON coredns_records "
                              f"WHEN old.id = {second.id} BEGIN SELECT RAISE(ABORT, 'locked row'); END"))
        await db.commit()

    result = await store.delete(ZONE, [first, second])

    assert isinstance(result.error, StoreConnectionError)
    assert result.records == [first]
    remaining = (await store.list(ZONE)).raise_for_error()
    assert [r.id for r in remaining] == [second.id]
