"""Shared fixtures.

The store tests run against in-memory SQLite; service and API tests can swap
collaborators for the in-process doubles in ``tests.doubles``.
"""

from __future__ import annotations

import pytest
import pytest_asyncio

from bizplan.config import Settings
from bizplan.database.session import build_engine, build_session_maker, close_db, init_db
from bizplan.database.store import PlanStore
from bizplan.errors import GenerationFailed, StoreUnavailable
from tests.doubles import MemoryPlanStore, StubGenerator


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        _env_file=None,
        openrouter_api_key="test-key",
        openrouter_model="test/model",
        database_url="sqlite+aiosqlite://",
        cache_path=tmp_path / "last_plan.json",
    )


@pytest_asyncio.fixture()
async def engine(settings):
    engine = build_engine(settings)
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest.fixture()
def store(engine):
    return PlanStore(build_session_maker(engine))


@pytest.fixture()
def generator():
    return StubGenerator()


@pytest.fixture()
def failing_generator():
    return StubGenerator(error=GenerationFailed("upstream 502"))


@pytest.fixture()
def memory_store():
    return MemoryPlanStore()


@pytest.fixture()
def broken_store():
    return MemoryPlanStore(fail_with=StoreUnavailable("database is down"))
