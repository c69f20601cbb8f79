"""Process lifespan for the user store.

Entry points wrap their work in ``user_store_lifespan``: structlog is
configured from settings, a Database handle is opened, and the engine is
disposed when the block exits.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from infrastructure.database import Database
from infrastructure.logging import configure_logging
from infrastructure.observability.probes import ConnectionProbe
from infrastructure.settings import Settings, get_settings


@asynccontextmanager
async def user_store_lifespan(
    settings: Settings | None = None,
    probe: ConnectionProbe | None = None,
) -> AsyncIterator[Database]:
    """Configure logging and provide a Database for the life of the process.

    Usage:
        async with user_store_lifespan() as database:
            async with database.session() as session:
                service = build_user_service(session)

    Args:
        settings: Application settings (defaults to the cached settings)
        probe: Optional probe for the storage handle

    Yields:
        The open Database handle
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    database = Database.from_settings(settings.database, probe=probe)
    try:
        yield database
    finally:
        await database.dispose()
