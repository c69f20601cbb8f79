"""Explicit storage handle for async SQLAlchemy.

A Database owns one engine and one session factory. It is constructed at
process startup and passed to whoever needs sessions, instead of living in
a module-level global.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_engine
from infrastructure.database.exceptions import SchemaError
from infrastructure.database.models import Base
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings


class Database:
    """Storage handle wrapping an async engine and its session factory.

    Sessions are created with ``expire_on_commit=False`` and never
    auto-commit. Callers manage transactions with ``session.begin()``.
    """

    def __init__(self, engine: AsyncEngine, probe: ConnectionProbe | None = None):
        """Initialize the handle around an existing engine.

        Args:
            engine: Async engine to issue statements on
            probe: Optional observability probe
        """
        self._engine = engine
        self._probe = probe or DefaultConnectionProbe()
        self._sessionmaker = async_sessionmaker(
            engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    @classmethod
    def from_settings(
        cls, settings: DatabaseSettings, probe: ConnectionProbe | None = None
    ) -> Database:
        """Create a handle with a new engine built from settings."""
        database = cls(create_engine(settings), probe=probe)
        database._probe.engine_created(settings.connection_string)
        return database

    @property
    def engine(self) -> AsyncEngine:
        """The underlying async engine."""
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Provide a session that is closed when the block exits.

        Usage:
            async with database.session() as session:
                service = build_user_service(session)
                await service.create(...)
        """
        async with self._sessionmaker() as session:
            yield session

    async def create_schema(self) -> None:
        """Create every table registered on the declarative Base.

        Existing tables are left alone. Model modules must be imported
        before this is called so their tables are registered.

        Raises:
            SchemaError: If the backend rejects the DDL
        """
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            self._probe.schema_creation_failed(e)
            raise SchemaError("Failed to create database schema") from e

        self._probe.schema_created(sorted(Base.metadata.tables))

    async def dispose(self) -> None:
        """Close every pooled connection held by the engine."""
        await self._engine.dispose()
        self._probe.engine_disposed()
