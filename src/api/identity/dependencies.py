"""Dependency wiring for the identity bounded context.

Composes an explicitly provided database session with identity-specific
components (repository, probes, service). Nothing here holds global state;
callers own the session and decide its lifetime.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import DefaultUserServiceProbe
from identity.application.services import UserService
from identity.infrastructure.observability import DefaultUserRepositoryProbe
from identity.infrastructure.user_repository import UserRepository
from shared_kernel.observability_context import ObservationContext


def build_user_service(
    session: AsyncSession,
    context: ObservationContext | None = None,
    clock: Callable[[], datetime] | None = None,
) -> UserService:
    """Build a UserService bound to one session.

    Args:
        session: Session the service will run its transactions on
        context: Optional observation context bound to every probe
        clock: Optional source of the current UTC time

    Returns:
        A ready-to-use UserService
    """
    repository_probe = DefaultUserRepositoryProbe()
    service_probe = DefaultUserServiceProbe()
    if context is not None:
        repository_probe = repository_probe.with_context(context)
        service_probe = service_probe.with_context(context)

    return UserService(
        user_repository=UserRepository(session=session, probe=repository_probe),
        session=session,
        probe=service_probe,
        clock=clock,
    )
