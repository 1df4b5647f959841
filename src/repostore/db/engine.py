"""Connection pool handle.

The pool is not module-global: callers build a ``Database``, ``init()`` it at
startup, pass it to whatever needs connections and ``shutdown()`` it on exit.
"""
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from repostore.config import Settings
from repostore.errors import ConnectionFailure, DatabaseNotInitialized

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, url: str, *, pool_size: int = 10, echo: bool = False):
        self.url = url
        self.pool_size = pool_size
        self.echo = echo
        self._engine: AsyncEngine | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.db_url, pool_size=settings.db_pool_size, echo=settings.db_echo)

    @property
    def engine(self) -> AsyncEngine:
        """Return the underlying SQLAlchemy engine."""
        if self._engine is None:
            raise DatabaseNotInitialized()
        return self._engine

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    async def init(self) -> None:
        """Create the engine and its pool. Calling it twice is a no-op."""
        if self._engine is not None:
            return
        self._engine = create_async_engine(
            self.url,
            pool_size=self.pool_size,
            max_overflow=0,
            pool_pre_ping=True,
            echo=self.echo,
        )
        logger.info(f"Database connection pool created (size={self.pool_size})")

    async def shutdown(self) -> None:
        """Dispose of every pooled connection."""
        if self._engine is None:
            return
        engine, self._engine = self._engine, None
        await engine.dispose()
        logger.info("Database connection pool closed")

    async def __aenter__(self) -> "Database":
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[AsyncConnection]:
        """Check one connection out of the pool; it goes back on every exit path."""
        try:
            conn = await self.engine.connect()
        except (SQLAlchemyError, OSError) as exc:
            logger.error(f"Could not acquire a database connection: {exc}")
            raise ConnectionFailure(f"Could not acquire a database connection: {exc}") from exc
        try:
            yield conn
        finally:
            await conn.close()
