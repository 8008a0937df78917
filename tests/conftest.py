"""
Hivemind — Test Configuration (conftest.py)
===========================================

What:  Shared pytest fixtures for the whole test suite.
How:   pytest auto-discovers this file; fixtures are function-scoped so every
       test gets a fresh store.

Fixtures:
    seed_sensors / seed_switches: Entities most API tests start from
    memory_store:                 Seeded InMemoryHivemindStore
    sqlite_store:                 Opened SQLiteHivemindStore in tmp_path
    store:                        Parametrized over both backends (contract suite)
    client:                       HTTPX AsyncClient on an app over memory_store
    make_client:                  Builds a client for any store/settings
"""

import os
from contextlib import asynccontextmanager

# Environment must be set before hivemind.config is imported
os.environ["HIVEMIND_STORE"] = "memory"
os.environ["HIVEMIND_LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from hivemind.config import Settings
from hivemind.main import create_app
from hivemind.schemas.entities import Sensor, Switch
from hivemind.stores import InMemoryHivemindStore, SQLiteHivemindStore


@pytest.fixture
def seed_sensors():
    return [
        Sensor(id="test", value=64),
        Sensor(id="second", value=2),
    ]


@pytest.fixture
def seed_switches():
    return [
        Switch(id="lamp", name="Lamp", type="relay", state=True),
    ]


@pytest.fixture
def memory_store(seed_sensors, seed_switches):
    return InMemoryHivemindStore(seed=seed_sensors + seed_switches)


@pytest_asyncio.fixture
async def sqlite_store(tmp_path):
    """An opened on-disk store in a per-test temporary directory."""
    store = SQLiteHivemindStore(str(tmp_path / "test.db"))
    await store.open()
    yield store
    await store.close()


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def store(request, tmp_path):
    """
    An empty, opened store of each backend.

    Tests using this fixture run once per backend, which makes them the
    contract every HivemindStore implementation has to satisfy.
    """
    if request.param == "memory":
        backend = InMemoryHivemindStore()
    else:
        backend = SQLiteHivemindStore(str(tmp_path / "contract.db"))
    await backend.open()
    yield backend
    await backend.close()


@pytest.fixture
def make_client():
    """
    Build an AsyncClient for an app wired to the given store.

    Usage:
        async with make_client(store) as client:
            response = await client.get("/api/sensor/")
    """

    @asynccontextmanager
    async def _make(store, app_settings=None):
        app = create_app(store, app_settings or Settings(store="memory"))
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    return _make


@pytest_asyncio.fixture
async def client(make_client, memory_store):
    async with make_client(memory_store) as c:
        yield c
