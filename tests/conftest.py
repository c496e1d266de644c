# tests/conftest.py

import functools

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from zonestore.services.zone_store import ZoneStore
from zonestore.storage.db import ConnectionManager

# SQLite picks its own pool class per URL; pin the queue pool so the fixed
# pool limits apply the same way they do against MySQL.
sqlite_engine = functools.partial(create_async_engine, poolclass=AsyncAdaptedQueuePool)


@pytest.fixture(scope="function")
def engine_factory():
    return sqlite_engine

@pytest.fixture(scope="function")
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'zones.db'}"

# Fresh database with the coredns_records table for every test
@pytest.fixture(scope="function")
async def connections(database_url, engine_factory):
    manager = ConnectionManager(database_url, engine_factory=engine_factory)
    await manager.create_schema()
    yield manager
    await manager.dispose()

@pytest.fixture(scope="function")
def store(connections):
    return ZoneStore(connections=connections)
