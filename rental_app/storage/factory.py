import logging
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncEngine

from core.get_db import build_engine, build_session_factory
from core.settings import settings
from storage.database_storage import DatabaseStorage
from storage.interface import StorageInterface
from storage.memory_storage import MemStorage

logger = logging.getLogger(__name__)

MEMORY_BACKENDS = {"memory", "mem"}
DATABASE_BACKENDS = {"database", "db", "postgres"}


def create_storage(
    backend: Optional[str] = None,
    url: Optional[str] = None,
    seed_demo_data: Optional[bool] = None,
) -> Tuple[StorageInterface, Optional[AsyncEngine]]:
    """Build the configured backend.

    Returns the storage and, for the database backend, the engine it runs
    on so the caller can create the schema and dispose of it. The memory
    backend seeds itself here; the database backend is seeded by the
    caller once its schema exists.
    """
    backend = (backend or settings.STORAGE_BACKEND).strip().lower()

    if backend in MEMORY_BACKENDS:
        logger.info("Using in-memory storage")
        return MemStorage(seed_demo_data=seed_demo_data), None

    if backend in DATABASE_BACKENDS:
        engine = build_engine(url)
        logger.info("Using database storage at %s", engine.url.render_as_string(hide_password=True))
        return DatabaseStorage(build_session_factory(engine)), engine

    raise ValueError(f"Unknown storage backend: {backend!r}")
