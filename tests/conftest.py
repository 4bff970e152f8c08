from contextlib import asynccontextmanager

import pytest

from core.get_db import build_engine, build_session_factory, create_schema
from storage.database_storage import DatabaseStorage
from storage.memory_storage import MemStorage

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@asynccontextmanager
async def database_storage():
    engine = build_engine(MEMORY_URL, echo=False)
    await create_schema(engine)
    try:
        yield DatabaseStorage(build_session_factory(engine))
    finally:
        await engine.dispose()


@pytest.fixture
def mem_storage():
    """Empty in-memory store."""
    return MemStorage(seed_demo_data=False)


@pytest.fixture
async def db_storage():
    """Empty database store on a private in-memory SQLite database."""
    async with database_storage() as storage:
        yield storage


@pytest.fixture(params=["memory", "database"])
async def storage(request):
    """Runs the test once per backend."""
    if request.param == "memory":
        yield MemStorage(seed_demo_data=False)
        return
    async with database_storage() as db_store:
        yield db_store
