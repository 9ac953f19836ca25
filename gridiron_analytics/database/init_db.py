"""Database initialization for local development and tests.

In production the hosted store owns its schema (migrations live there). This
module creates the same tables from the SQLAlchemy models so a local SQLite
file, or an in-memory database in tests, can stand in for it.

Lifecycle Operations:
- create_database(): Initialize schema from SQLAlchemy models (idempotent)
- drop_database(): Remove all tables (destructive operation)
- reset_database(): Complete refresh (drop + create)
"""

import asyncio
import logging
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine

from .connection import engine as default_engine
from .models import Base

logger = logging.getLogger(__name__)


async def create_database(engine: AsyncEngine | None = None) -> None:
    """Create all tables defined in models.py.

    For a SQLite file the parent directory is created first so the file can be
    opened. Errors are logged with a stack trace and re-raised.
    """
    engine = engine or default_engine
    try:
        if engine.url.get_backend_name() == "sqlite" and engine.url.database:
            Path(engine.url.database).parent.mkdir(parents=True, exist_ok=True)

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database tables created successfully")

    except Exception:
        logger.exception("Failed to create database")
        raise


async def drop_database(engine: AsyncEngine | None = None) -> None:
    """Drop all tables - DESTRUCTIVE OPERATION."""
    engine = engine or default_engine
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

        logger.info("Database tables dropped successfully")

    except Exception:
        logger.exception("Failed to drop database")
        raise


async def reset_database(engine: AsyncEngine | None = None) -> None:
    """Drop and recreate all tables. All data is lost."""
    logger.info("Resetting database...")
    await drop_database(engine)
    await create_database(engine)
    logger.info("Database reset complete")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_database())
