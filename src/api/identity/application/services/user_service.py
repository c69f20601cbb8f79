"""User application service for the identity bounded context.

This is the user record store: the only public surface for creating,
finding, updating and deleting user records.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import DefaultUserServiceProbe, UserServiceProbe
from identity.domain.aggregates import UserRecord
from identity.domain.exceptions import ValidationError
from identity.domain.value_objects import UniqueField, UserId
from identity.ports.exceptions import ConflictError, NotFoundError, StorageError
from identity.ports.repositories import IUserRepository


def _utc_now() -> datetime:
    return datetime.now(UTC)


class UserService:
    """Application service for user record management.

    Every operation runs in its own transaction. Field validation always
    happens before anything is written, and the uniqueness checks share
    the transaction with the write that follows them. The storage unique
    indexes reject whatever a concurrent writer slips in between, so two
    creates with the same username can never both succeed.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        session: AsyncSession,
        probe: UserServiceProbe | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for user persistence
            session: Database session for transaction management
            probe: Optional domain probe for observability
            clock: Optional source of the current UTC time
        """
        self._user_repository = user_repository
        self._session = session
        self._probe = probe or DefaultUserServiceProbe()
        self._clock = clock or _utc_now

    async def create(
        self,
        username: Any,
        email: Any,
        password: Any,
        metadata: Mapping[str, Any] | None = None,
    ) -> UserRecord:
        """Validate and persist a new user record.

        Args:
            username: Candidate username (trimmed before storage)
            email: Candidate email address (trimmed before storage)
            password: Candidate password (trimmed, stored as given)
            metadata: Optional open-ended mapping, defaults to empty

        Returns:
            The stored UserRecord with created_at == updated_at

        Raises:
            ValidationError: If a field rule fails
            ConflictError: If the username or email is already taken
            StorageError: If the backend fails
        """
        try:
            user = UserRecord.create(
                username=username,
                email=email,
                password=password,
                metadata=metadata,
                now=self._clock(),
            )
        except ValidationError as e:
            self._probe.user_validation_failed(field=str(e.field), rule=str(e.rule))
            raise

        async with self._transaction("create"):
            await self._ensure_unique(user)
            await self._user_repository.add(user)

        self._probe.user_created(user_id=user.id.value, username=user.username)
        return user

    async def get(self, user_id: UserId) -> UserRecord:
        """Retrieve a user record by ID.

        Raises:
            NotFoundError: If no record has this ID
        """
        async with self._transaction("get"):
            user = await self._user_repository.get_by_id(user_id)
            if user is None:
                raise NotFoundError("id", user_id.value)
        return user

    async def find_by_username(self, username: str) -> UserRecord:
        """Retrieve the user record holding exactly this username.

        Raises:
            NotFoundError: If no record has this username
        """
        async with self._transaction("find_by_username"):
            user = await self._user_repository.get_by_username(username)
            if user is None:
                raise NotFoundError(UniqueField.USERNAME.value, username)
        return user

    async def find_by_email(self, email: str) -> UserRecord:
        """Retrieve the user record holding exactly this email.

        Raises:
            NotFoundError: If no record has this email
        """
        async with self._transaction("find_by_email"):
            user = await self._user_repository.get_by_email(email)
            if user is None:
                raise NotFoundError(UniqueField.EMAIL.value, email)
        return user

    async def update(self, user_id: UserId, changes: Mapping[str, Any]) -> UserRecord:
        """Apply a partial update to an existing user record.

        Only the supplied fields are validated, using the same rules as
        create. Uniqueness is checked against every other record. Either
        the whole update lands or the stored record is left as it was.

        Args:
            user_id: Identifier of the record to update
            changes: Subset of username, email, password, metadata

        Returns:
            The updated UserRecord

        Raises:
            NotFoundError: If no record has this ID
            ValidationError: If a key is not writable or a value is invalid
            ConflictError: If the new username or email is already taken
            StorageError: If the backend fails
        """
        async with self._transaction("update"):
            current = await self._user_repository.get_by_id(user_id)
            if current is None:
                raise NotFoundError("id", user_id.value)

            updated = current.with_changes(changes, now=self._clock())
            await self._ensure_unique(updated, previous=current)
            await self._user_repository.update(updated)

        self._probe.user_updated(user_id=user_id.value, fields=sorted(changes))
        return updated

    async def delete(self, user_id: UserId) -> None:
        """Permanently remove a user record.

        Raises:
            NotFoundError: If no record has this ID
        """
        async with self._transaction("delete"):
            deleted = await self._user_repository.delete(user_id)
            if not deleted:
                raise NotFoundError("id", user_id.value)

        self._probe.user_deleted(user_id=user_id.value)

    async def _ensure_unique(
        self, user: UserRecord, previous: UserRecord | None = None
    ) -> None:
        """Reject the write if another record holds the username or email.

        When ``previous`` is given, fields that did not change are skipped.
        """
        if previous is None or user.username != previous.username:
            holder = await self._user_repository.get_by_username(user.username)
            if holder is not None and holder.id != user.id:
                raise ConflictError(UniqueField.USERNAME.value, user.username)

        if previous is None or user.email != previous.email:
            holder = await self._user_repository.get_by_email(user.email)
            if holder is not None and holder.id != user.id:
                raise ConflictError(UniqueField.EMAIL.value, user.email)

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[None]:
        """Run a block in one transaction and record how it failed.

        Errors are re-raised unchanged, except raw SQLAlchemy errors from
        commit or rollback, which become StorageError.
        """
        try:
            async with self._session.begin():
                yield
        except ValidationError as e:
            self._probe.user_validation_failed(field=str(e.field), rule=str(e.rule))
            raise
        except ConflictError as e:
            self._probe.user_conflict(field=e.field)
            raise
        except NotFoundError as e:
            self._probe.user_not_found(key=e.key, value=e.value)
            raise
        except StorageError as e:
            self._probe.storage_failed(operation=operation, error=str(e))
            raise
        except SQLAlchemyError as e:
            self._probe.storage_failed(operation=operation, error=str(e))
            raise StorageError(f"Storage failure during {operation}") from e
