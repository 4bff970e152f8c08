import logging
from contextlib import asynccontextmanager
from typing import Optional

from storage.factory import create_storage
from storage.seed import seed_storage

from .get_db import create_schema
from .settings import settings

logger = logging.getLogger("startup")


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def storage_lifespan(
    backend: Optional[str] = None,
    url: Optional[str] = None,
    seed_demo_data: Optional[bool] = None,
):
    configure_logging()
    logger.info("Waiting for %s storage startup...", settings.PROJECT_NAME)

    if seed_demo_data is None:
        seed_demo_data = settings.SEED_DEMO_DATA

    storage, engine = create_storage(backend, url, seed_demo_data=seed_demo_data)

    if engine is not None:
        try:
            await create_schema(engine)
            logger.info("Database schema ready.")
            if seed_demo_data and not await storage.list_users():
                await seed_storage(storage)
        except Exception:
            logger.exception("Database storage startup failed")
            await engine.dispose()
            raise

    logger.info("Storage startup complete.")

    try:
        yield storage
    finally:
        if engine is not None:
            await engine.dispose()
            logger.info("Database engine disposed.")
