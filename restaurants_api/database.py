"""
Restaurants API - Database Handle and Session Management
=========================================================

What:  The `Database` handle (engine + session factory), the declarative
       `Base`, and the FastAPI session dependency.
Why:   The store connection is an explicit object owned by whoever started
       the server, instead of an engine created at import time. That lets
       `start()` connect, `stop()` disconnect, and tests run several
       isolated instances in one process.
How:   `connect()` creates an async engine, pings it, and optionally creates
       the schema. `session()` hands out one AsyncSession per request.
       `disconnect()` disposes the pool.

Connection Pooling Strategy:
    Server databases (PostgreSQL via asyncpg) get a sized pool with
    pre-ping and hourly recycling. SQLite (aiosqlite) keeps SQLAlchemy's
    default pool, since pool sizing arguments do not apply to it.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from restaurants_api.config import settings
from restaurants_api.exceptions import StoreError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, used both by `Database.connect`
    (create_all) and by Alembic autogenerate.
    """
    pass


def _engine_options(url: str) -> Dict[str, Any]:
    """Engine keyword arguments for the given URL."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


class Database:
    """
    Connection handle for the restaurants store.

    Lifecycle:
        Database(url) → connect() → session()* → disconnect()

    A handle may be reconnected after disconnect(). `connect()` is
    all-or-nothing: if the ping or schema creation fails, the engine is
    disposed and the original exception propagates.
    """

    def __init__(self, url: str, create_schema: Optional[bool] = None):
        self.url = url
        self.create_schema = (
            settings.db_create_schema if create_schema is None else create_schema
        )
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StoreError(message="The restaurants store is not connected")
        return self._engine

    async def connect(self) -> None:
        """
        Open the engine and verify the store is reachable.

        Runs `SELECT 1` so an unreachable or misconfigured database fails
        here (during server start) instead of on the first request.
        """
        if self._engine is not None:
            return

        # Models must be imported before create_all so their tables are registered
        from restaurants_api.models import restaurant  # noqa: F401

        engine = create_async_engine(self.url, **_engine_options(self.url))
        try:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.create_schema:
                    await conn.run_sync(Base.metadata.create_all)
        except Exception:
            await engine.dispose()
            raise

        self._engine = engine
        # expire_on_commit=False: attributes stay readable after commit,
        # needed to build the response for a freshly inserted row
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info(
            "Connected to restaurants store at %s",
            engine.url.render_as_string(hide_password=True),
        )

    async def disconnect(self) -> None:
        """Dispose the connection pool. Safe to call when not connected."""
        engine, self._engine, self._session_factory = self._engine, None, None
        if engine is not None:
            await engine.dispose()
            logger.info("Disconnected from restaurants store")

    async def ping(self) -> bool:
        """Lightweight reachability check used by the health route."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
        return True

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide one AsyncSession, rolled back on error and always closed.

        Commits are issued by the service layer, so a failed commit is
        reported as a store failure of that request.
        """
        if self._session_factory is None:
            raise StoreError(message="The restaurants store is not connected")

        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The `Database` handle is read from `app.state.database`, which is set by
    `restaurants_api.server.start` (or by the app lifespan when the app is
    run directly under uvicorn).

    Example usage in a route:
        @router.get("/restaurants")
        async def list_restaurants(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise StoreError(message="No restaurants store is attached to the application")

    async with database.session() as session:
        yield session
