"""Integration test fixtures for the user record store.

These fixtures run the real repository and service against a file-backed
SQLite database through aiosqlite, so no external server is needed.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

import identity.infrastructure.models  # noqa: F401  registers the users table
from identity.application.services import UserService
from identity.dependencies import build_user_service
from infrastructure.database import Database


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """URL of a fresh SQLite database file for each test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'users.db'}"


@pytest_asyncio.fixture
async def database(database_url: str) -> AsyncIterator[Database]:
    """Provide a Database handle with the schema created.

    The engine is disposed after each test.
    """
    database = Database(create_async_engine(database_url))
    await database.create_schema()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def session(database: Database) -> AsyncIterator[AsyncSession]:
    """Provide a session for the test body."""
    async with database.session() as session:
        yield session


@pytest.fixture
def user_service(session: AsyncSession) -> UserService:
    """Provide a fully wired UserService on the test session."""
    return build_user_service(session)


@pytest.fixture
def open_session(
    database: Database,
) -> Callable[[], AbstractAsyncContextManager[AsyncSession]]:
    """Open additional sessions, e.g. to act as a second writer."""
    return database.session
