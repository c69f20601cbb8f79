"""Unit test fixtures with mocked dependencies."""

import pytest


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep USERSTORE_* variables from the host out of unit tests."""
    import os

    for name in list(os.environ):
        if name.startswith("USERSTORE_"):
            monkeypatch.delenv(name)


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )
