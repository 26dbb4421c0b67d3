"""
AI Productivity Hub Backend — Database Session Management
==========================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI session dependency.
Why:   Centralizes connection logic for the hosted PostgreSQL database.
How:   `build_engine(settings)` is called by the app factory; the engine and
       session factory live on `app.state` so each app instance (including
       test instances) owns its own pool. `get_db_session` hands one session
       to each request and commits or rolls back at the end.
Who:   Route handlers via Depends(get_db_session); the health check uses the engine.

Schema ownership:
    Every table and stored procedure this service touches is owned by the
    hosted database project. The ORM classes in prodhub.models only map
    columns that are read here; this service never creates or migrates them.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from prodhub.config import Settings


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    Pool sizing only applies to server databases; SQLite (used by the test
    suite) runs without a sized pool.
    """
    options = {
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: rows stay readable after the request commits
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    """Base class for the ORM mappings of externally owned tables."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    1. Opens a session from the app's session factory
    2. Yields it to the handler
    3. Commits on success (persists usage increments), rolls back on error
    4. Always closes the session, returning the connection to the pool
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine(engine: AsyncEngine) -> None:
    """Closes all pooled connections. Called from the lifespan on shutdown."""
    await engine.dispose()
