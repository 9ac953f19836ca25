"""Database connection and session management using SQLAlchemy's asyncio extension.

The analytics engine runs on one event loop and spends nearly all of its time
waiting on the data store, so the store is reached through an async engine.
Every query is a suspension point; many of them can be in flight at once.

Session Patterns Provided:
1. create_engine_from_url(): build an engine for any async driver URL
2. get_session_context(): async context manager with commit/rollback

An AsyncSession must not run two statements at once, so concurrent work
opens one short session per query rather than sharing a request session.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..config.settings import settings


def create_engine_from_url(database_url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create an async engine.

    pool_pre_ping tests pooled connections before use, which matters for the
    hosted store where idle connections get dropped.
    """
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True, **kwargs)


# Module-level engine and session factory, configured once from settings.
# Nothing connects until the first query runs.
engine = create_engine_from_url(settings.database_url, echo=settings.database_echo)

SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,  # Rows stay readable after commit (we hand them to calculators)
    autoflush=False,
)


@asynccontextmanager
async def get_session_context(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Async context manager for database sessions.

    Usage:
        async with get_session_context() as session:
            await session.execute(stmt)

    Commits on success, rolls back and re-raises on error, always closes.
    """
    session = (session_factory or SessionLocal)()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()

