"""Protocol for user application service observability.

Defines the interface for domain probes that capture application-level
domain events for user record store operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def user_created(self, user_id: str, username: str) -> None:
        """Record that a user record was created."""
        ...

    def user_updated(self, user_id: str, fields: list[str]) -> None:
        """Record that a user record was updated."""
        ...

    def user_deleted(self, user_id: str) -> None:
        """Record that a user record was deleted."""
        ...

    def user_validation_failed(self, field: str, rule: str) -> None:
        """Record that a candidate value failed a field rule."""
        ...

    def user_conflict(self, field: str) -> None:
        """Record that a uniqueness rule rejected a write."""
        ...

    def user_not_found(self, key: str, value: str) -> None:
        """Record that an operation referenced a missing record."""
        ...

    def storage_failed(self, operation: str, error: str) -> None:
        """Record that the storage backend failed during an operation."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def user_created(self, user_id: str, username: str) -> None:
        """Record that a user record was created."""
        self._logger.info(
            "user_created",
            user_id=user_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def user_updated(self, user_id: str, fields: list[str]) -> None:
        """Record that a user record was updated."""
        self._logger.info(
            "user_updated",
            user_id=user_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: str) -> None:
        """Record that a user record was deleted."""
        self._logger.info(
            "user_deleted",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_validation_failed(self, field: str, rule: str) -> None:
        """Record that a candidate value failed a field rule."""
        self._logger.info(
            "user_validation_failed",
            field=field,
            rule=rule,
            **self._get_context_kwargs(),
        )

    def user_conflict(self, field: str) -> None:
        """Record that a uniqueness rule rejected a write."""
        self._logger.warning(
            "user_conflict",
            field=field,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, key: str, value: str) -> None:
        """Record that an operation referenced a missing record."""
        self._logger.debug(
            "user_not_found",
            key=key,
            value=value,
            **self._get_context_kwargs(),
        )

    def storage_failed(self, operation: str, error: str) -> None:
        """Record that the storage backend failed during an operation."""
        self._logger.error(
            "user_store_storage_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
