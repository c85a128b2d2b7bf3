# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database connection management using SQLAlchemy async.

The process holds one engine, created lazily by the first caller that
needs a session. Initialization is memoized through an in-flight task:
concurrent first callers all await the same task and receive the same
engine. If initialization fails the task is discarded, so the next caller
starts a fresh attempt instead of re-raising a cached failure.

Example:
    from academy.infrastructure.database.connection import db_connector

    async with db_connector.session() as session:
        result = await session.execute(select(User))
        users = result.scalars().all()
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from academy.core.config import get_settings
from academy.core.config.settings import DatabaseSettings
from academy.infrastructure.database.models import Base

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or driver error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


def _engine_options(settings: DatabaseSettings) -> dict:
    options: dict = {"echo": settings.echo, "pool_pre_ping": True}
    if make_url(settings.url).get_backend_name() == "postgresql":
        options.update(
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_recycle=1800,
        )
    return options


class DatabaseConnector:
    """Lazily initialized, process-wide database engine.

    Attributes:
        is_initialized: Whether an engine is ready for use.
    """

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None
        self._init_task: asyncio.Task[AsyncEngine] | None = None

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    async def connect(self, settings: DatabaseSettings | None = None) -> AsyncEngine:
        """Return the shared engine, creating it on first use.

        Args:
            settings: Database settings; defaults to the application settings.

        Returns:
            The connected engine.

        Raises:
            DatabaseError: If the engine cannot be created or reached.
        """
        if self._engine is not None:
            return self._engine

        if self._init_task is None:
            self._init_task = asyncio.ensure_future(
                self._initialize(settings or get_settings().database)
            )
        task = self._init_task

        try:
            # shield: a cancelled waiter must not cancel the shared attempt
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            raise
        except Exception:
            if self._init_task is task:
                self._init_task = None
            raise

    async def _initialize(self, settings: DatabaseSettings) -> AsyncEngine:
        engine: AsyncEngine | None = None
        try:
            engine = create_async_engine(settings.url, **_engine_options(settings))
            async with engine.begin() as conn:
                if settings.create_schema:
                    await conn.run_sync(Base.metadata.create_all)
                else:
                    await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            if engine is not None:
                await engine.dispose()
            logger.error("Database connection failed: %s", e)
            raise DatabaseError("Failed to connect to database", e) from e

        self._sessionmaker = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._engine = engine
        logger.info("Database connection established: %s", make_url(settings.url).render_as_string())
        return engine

    async def get_sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        await self.connect()
        if self._sessionmaker is None:
            raise DatabaseError("Database session factory is not initialized")
        return self._sessionmaker

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session that commits on success and rolls back on error.

        Yields:
            AsyncSession for database operations.

        Raises:
            DatabaseError: If the connection or a database operation fails.
        """
        sessionmaker = await self.get_sessionmaker()

        async with sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError("Database operation failed", e) from e
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """Check whether the database is reachable.

        Returns:
            True if a trivial query succeeds, False otherwise.
        """
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError):
            return False

    async def close(self) -> None:
        """Dispose of the engine so the next connect() starts over."""
        task = self._init_task
        if task is not None and not task.done():
            task.cancel()
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        self._init_task = None


db_connector = DatabaseConnector()
