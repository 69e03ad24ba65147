import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .cache import cache
from .get_db import async_engine, create_tables
from .settings import settings

logger = logging.getLogger("startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Waiting for application startup...")

    if settings.AUTO_CREATE_TABLES:
        await create_tables()
        logger.info("Database tables ready.")

    try:
        await cache.connect()
    except Exception:
        logger.exception("Upstash Redis connection failed, continuing without cache")

    logger.info("Application startup complete.")

    yield

    await async_engine.dispose()
    logger.info("Database engine disposed.")
