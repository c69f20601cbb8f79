"""Unit tests for the Database storage handle."""

from unittest.mock import AsyncMock, MagicMock, create_autospec, patch

import pytest
from pydantic import SecretStr
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine

import identity.infrastructure.models  # noqa: F401  registers the users table
from infrastructure.database import Database, SchemaError
from infrastructure.observability.probes import ConnectionProbe
from infrastructure.settings import DatabaseSettings


@pytest.fixture
def mock_probe():
    """Create mock connection probe."""
    return create_autospec(ConnectionProbe, instance=True)


@pytest.fixture
def mock_engine():
    """Create mock async engine whose begin() yields a connection."""
    engine = MagicMock(spec=AsyncEngine)
    conn = AsyncMock()

    ctx_manager = AsyncMock()
    ctx_manager.__aenter__ = AsyncMock(return_value=conn)
    ctx_manager.__aexit__ = AsyncMock(return_value=None)

    engine.begin = MagicMock(return_value=ctx_manager)
    engine.dispose = AsyncMock()
    return engine


class TestDatabase:
    """Tests for Database."""

    def test_exposes_engine(self, mock_engine, mock_probe):
        database = Database(mock_engine, probe=mock_probe)

        assert database.engine is mock_engine

    def test_from_settings_builds_engine_and_reports(self, mock_probe):
        """from_settings creates an engine and logs the masked URL."""
        settings = DatabaseSettings(url=SecretStr("sqlite+aiosqlite:///:memory:"))

        database = Database.from_settings(settings, probe=mock_probe)

        assert database.engine.url.get_backend_name() == "sqlite"
        mock_probe.engine_created.assert_called_once_with(
            "sqlite+aiosqlite:///:memory:"
        )
        database.engine.sync_engine.dispose()

    @pytest.mark.asyncio
    async def test_session_yields_async_session(self, mock_probe):
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        database = Database(engine, probe=mock_probe)

        async with database.session() as session:
            assert isinstance(session, AsyncSession)
            assert session.bind is engine

        await engine.dispose()

    @pytest.mark.asyncio
    async def test_create_schema_runs_create_all(self, mock_engine, mock_probe):
        database = Database(mock_engine, probe=mock_probe)

        await database.create_schema()

        conn = mock_engine.begin.return_value.__aenter__.return_value
        conn.run_sync.assert_awaited_once()
        mock_probe.schema_created.assert_called_once()
        assert "users" in mock_probe.schema_created.call_args[0][0]

    @pytest.mark.asyncio
    async def test_create_schema_failure_raises_schema_error(
        self, mock_engine, mock_probe
    ):
        """DDL failures are reported and raised as SchemaError."""
        failure = OperationalError("CREATE TABLE", {}, Exception("read-only"))
        conn = mock_engine.begin.return_value.__aenter__.return_value
        conn.run_sync.side_effect = failure
        database = Database(mock_engine, probe=mock_probe)

        with pytest.raises(SchemaError) as exc_info:
            await database.create_schema()

        assert exc_info.value.__cause__ is failure
        mock_probe.schema_creation_failed.assert_called_once_with(failure)
        mock_probe.schema_created.assert_not_called()

    @pytest.mark.asyncio
    async def test_dispose_closes_engine(self, mock_engine, mock_probe):
        database = Database(mock_engine, probe=mock_probe)

        await database.dispose()

        mock_engine.dispose.assert_awaited_once()
        mock_probe.engine_disposed.assert_called_once()

    def test_default_probe_used_when_not_provided(self, mock_engine):
        with patch(
            "infrastructure.database.connection.DefaultConnectionProbe"
        ) as probe_cls:
            Database(mock_engine)

        probe_cls.assert_called_once_with()
