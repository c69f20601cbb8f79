"""Unit tests for identity dependency wiring."""

from unittest.mock import Mock

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import DefaultUserServiceProbe
from identity.application.services import UserService
from identity.dependencies import build_user_service
from identity.infrastructure.observability import DefaultUserRepositoryProbe
from identity.infrastructure.user_repository import UserRepository
from shared_kernel.observability_context import ObservationContext


class TestBuildUserService:
    """Tests for build_user_service."""

    def test_wires_repository_to_the_same_session(self):
        session = Mock(spec=AsyncSession)

        service = build_user_service(session)

        assert isinstance(service, UserService)
        assert service._session is session
        assert isinstance(service._user_repository, UserRepository)
        assert service._user_repository._session is session

    def test_uses_default_probes(self):
        service = build_user_service(Mock(spec=AsyncSession))

        assert isinstance(service._probe, DefaultUserServiceProbe)
        assert isinstance(service._user_repository._probe, DefaultUserRepositoryProbe)

    def test_binds_context_to_every_probe(self):
        context = ObservationContext(request_id="req-1")

        service = build_user_service(Mock(spec=AsyncSession), context=context)

        assert service._probe._context is context
        assert service._user_repository._probe._context is context

    def test_passes_clock_through(self):
        def clock():
            return None

        service = build_user_service(Mock(spec=AsyncSession), clock=clock)

        assert service._clock is clock
