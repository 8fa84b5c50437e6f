"""
Acme Ice Cream API: Database Engine & Session Management
=========================================================

What:  Async SQLAlchemy engine factory, session factory, declarative base and
       the FastAPI session dependency.
How:   The lifespan handler builds exactly one engine per process and stores it,
       together with its session factory, on `app.state`. Route handlers receive
       a fresh AsyncSession per request through `Depends(get_db_session)`.
Who:   Used by main.py (lifespan) and by route handlers.
When:  Engine is created at startup; sessions are created per request.

There is no module-level engine: the connection handle travels with the
application object, so tests can run the app against any database URL.
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

from icecream_api.config import Settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def create_engine(settings: Settings) -> AsyncEngine:
    """
    Build the process-wide async engine.

    Driver defaults are used for pooling. SQL echo is enabled only when the
    log level is DEBUG.
    """
    return create_async_engine(
        settings.database_url,
        pool_pre_ping=True,  # Validate before use (catches stale connections)
        echo=settings.log_level == "DEBUG",
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to the given engine.

    expire_on_commit=False keeps returned rows readable after the service
    commits, so they can be serialized once the statement is done.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory stored on app.state
        2. Yields it to the route handler (services commit their own statement)
        3. On error: rolls back whatever the failed statement left open
        4. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/flavors")
        async def list_flavors(db: AsyncSession = Depends(get_db_session)):
            return await flavor_service.list_flavors(db)
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise  # Re-raise so the global error handler can respond
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections held by the engine.
    When:  Called during application shutdown and after a failed startup.
    """
    await engine.dispose()
