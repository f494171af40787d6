"""
SQLAlchemy async storage backend.

Purpose
-------
Own a single ``AsyncEngine`` and session factory for the lifetime of a Bot.

Responsibilities
----------------
- Create the engine from a URL with pool settings (``NullPool`` for SQLite
  and the testing environment, ``QueuePool`` otherwise)
- Probe liveness with ``SELECT 1`` on connect so a bad URL fails startup
- Optionally ``metadata.create_all`` in the post-connect hook
- Hand out sessions (``session()``) and atomic transactions (``transaction()``)
- Dispose the engine on disconnect

Non-Responsibilities
--------------------
- Schema design and migrations
- Retry policies
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from switchboard.core.config import Config
from switchboard.storage.base import StorageManager


class StorageNotConnectedError(RuntimeError):
    """Raised when a session is requested before ``connect()`` or after ``disconnect()``."""


class SQLAlchemyStorage(StorageManager):
    """
    Async SQLAlchemy engine wrapper.

    Usage:
        >>> storage = SQLAlchemyStorage("sqlite+aiosqlite:///bot.db", metadata=Base.metadata)
        >>> bot = Bot(token=..., storage=storage)
        >>> async with storage.transaction() as session:
        ...     session.add(Reminder(...))
    """

    def __init__(
        self,
        url: str,
        *,
        metadata: Optional[MetaData] = None,
        echo: Optional[bool] = None,
        pool_size: Optional[int] = None,
        engine_options: Optional[Dict[str, Any]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(logger=logger)
        self.url = url
        self.metadata = metadata
        self.echo = Config.DATABASE_ECHO if echo is None else echo
        self.pool_size = pool_size or Config.DATABASE_POOL_SIZE
        self.engine_options = dict(engine_options or {})
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url_scheme(self) -> str:
        return self.url.split(":", 1)[0] if ":" in self.url else "unknown"

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StorageNotConnectedError("SQLAlchemyStorage is not connected")
        return self._engine

    def _engine_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"echo": self.echo}
        if self.url_scheme.startswith("sqlite") or Config.is_testing():
            kwargs["poolclass"] = NullPool
        else:
            kwargs.update(pool_size=self.pool_size, pool_pre_ping=True)
        kwargs.update(self.engine_options)
        return kwargs

    async def connect(self) -> None:
        if self._engine is not None:
            self.logger.debug("SQLAlchemyStorage already connected; skipping")
            return

        engine = create_async_engine(self.url, **self._engine_kwargs())
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            await engine.dispose()
            raise

        self._engine = engine
        self._session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.logger.debug("SQLAlchemy engine created", extra={"url_scheme": self.url_scheme})

    async def initialize(self) -> None:
        if self.metadata is None:
            return
        async with self.engine.begin() as conn:
            await conn.run_sync(self.metadata.create_all)
        self.logger.info(
            "Database schema ensured",
            extra={"tables": len(self.metadata.tables)},
        )

    async def disconnect(self) -> None:
        if self._engine is None:
            return
        try:
            await self._engine.dispose()
        finally:
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session without automatic commit; closed on exit."""
        if self._session_factory is None:
            raise StorageNotConnectedError("SQLAlchemyStorage is not connected")
        async with self._session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Session inside ``begin()``: commit on success, rollback on exception."""
        async with self.session() as session:
            async with session.begin():
                yield session

    async def health_check(self) -> bool:
        """``SELECT 1`` probe; False instead of raising when unreachable."""
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as exc:
            self.logger.warning(
                "Storage health check failed",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )
            return False


__all__ = ["SQLAlchemyStorage", "StorageNotConnectedError"]
