"""
Process-wide database handle.

The engine is created lazily on first use and cached for the lifetime of the
process. Concurrent first requests share a single connection attempt, and a
failed attempt is discarded so the next request can try again.
"""
import asyncio
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, InterfaceError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.core.config import settings
from app.core.errors import DatabaseUnavailableError
from app.core.logging import logger

Base = declarative_base()


class Database:
    """Lazily connected, cached async engine with a session factory."""

    def __init__(self, url: str):
        self.url = url
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker] = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _engine_options(self) -> dict:
        options = {"echo": settings.DB_ECHO, "future": True, "pool_pre_ping": True}
        # SQLite uses a static/single-connection pool that rejects sizing options
        if not self.url.startswith("sqlite"):
            options.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_recycle=settings.DB_POOL_RECYCLE,
            )
        return options

    async def connect(self) -> AsyncEngine:
        """
        Return the cached engine, creating and verifying it on first call.

        Raises:
            SQLAlchemyError: If the database cannot be reached. The handle stays
                unset so a later call retries.
        """
        if self._engine is not None:
            return self._engine

        async with self._lock:
            if self._engine is not None:
                return self._engine

            engine = create_async_engine(self.url, **self._engine_options())
            try:
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            except Exception:
                await engine.dispose()
                logger.error("Database connection attempt failed; will retry on next request")
                raise

            self._engine = engine
            self._sessionmaker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
            logger.info("Database connection established")
            return engine

    async def dispose(self) -> None:
        """Close all pooled connections and forget the engine."""
        engine = self._engine
        self._engine = None
        self._sessionmaker = None
        if engine is not None:
            await engine.dispose()
            logger.info("Database connection closed")

    async def reset_on_disconnect(self, exc: BaseException) -> bool:
        """
        Drop the cached engine if ``exc`` means the connection was lost.

        Returns:
            True if the handle was reset
        """
        lost = isinstance(exc, OSError) or (
            isinstance(exc, DBAPIError) and (exc.connection_invalidated or isinstance(exc, InterfaceError))
        )
        if lost:
            logger.warning("Database connection lost; resetting handle")
            await self.dispose()
        return lost

    async def open_session(self) -> AsyncSession:
        """
        Connect if needed and return a new session.

        Raises:
            DatabaseUnavailableError: If no connection could be established
        """
        try:
            await self.connect()
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseUnavailableError("Database unavailable", detail=str(e)) from e
        return self._sessionmaker()


database = Database(settings.DATABASE_URL)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    session = await database.open_session()
    async with session:
        yield session
