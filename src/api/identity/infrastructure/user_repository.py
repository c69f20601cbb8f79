"""SQLAlchemy implementation of IUserRepository.

Stores user records in the ``users`` table. The unique indexes on username
and email are the storage-level backstop for the uniqueness rules: a write
they reject is translated into ConflictError for the matching field.
"""

from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from identity.domain.aggregates import UserRecord
from identity.domain.value_objects import UniqueField, UserId
from identity.infrastructure.models import UserModel
from identity.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from identity.ports.exceptions import ConflictError, NotFoundError, StorageError
from identity.ports.repositories import IUserRepository

# Postgres reports the index name, SQLite reports table.column
_UNIQUE_MARKERS: dict[UniqueField, tuple[str, ...]] = {
    UniqueField.USERNAME: ("ix_users_username", "users.username"),
    UniqueField.EMAIL: ("ix_users_email", "users.email"),
}


def _duplicate_field(error: IntegrityError) -> UniqueField | None:
    """Work out which unique index rejected a write, if any."""
    message = str(error.orig) if error.orig is not None else str(error)
    for field, markers in _UNIQUE_MARKERS.items():
        if any(marker in message for marker in markers):
            return field
    return None


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class UserRepository(IUserRepository):
    """SQLAlchemy-backed repository for UserRecord aggregates.

    The repository only flushes; committing or rolling back is left to
    whoever owns the session transaction.
    """

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession owned by the caller
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def add(self, user: UserRecord) -> None:
        """Insert a new user record.

        Args:
            user: The UserRecord aggregate to persist

        Raises:
            ConflictError: If username or email is already stored
            StorageError: If the backend fails
        """
        model = UserModel(
            id=user.id.value,
            username=user.username,
            email=user.email,
            password=user.password,
            attributes=copy.deepcopy(user.metadata),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        self._session.add(model)
        await self._flush(user, operation="add")

        self._probe.user_saved(user.id.value, user.username)

    async def update(self, user: UserRecord) -> None:
        """Overwrite the stored state of an existing user record.

        id and created_at are never written here.

        Args:
            user: The UserRecord aggregate carrying the new state

        Raises:
            NotFoundError: If no record with this id exists
            ConflictError: If username or email is held by another record
            StorageError: If the backend fails
        """
        model = await self._fetch_one(
            select(UserModel).where(UserModel.id == user.id.value),
            operation="update",
        )
        if model is None:
            self._probe.user_not_found(user.id.value)
            raise NotFoundError("id", user.id.value)

        model.username = user.username
        model.email = user.email
        model.password = user.password
        model.attributes = copy.deepcopy(user.metadata)
        model.updated_at = user.updated_at
        await self._flush(user, operation="update")

        self._probe.user_saved(user.id.value, user.username)

    async def get_by_id(self, user_id: UserId) -> UserRecord | None:
        """Retrieve a user record by its ID.

        Args:
            user_id: The unique identifier of the record

        Returns:
            The UserRecord aggregate, or None if not found
        """
        model = await self._fetch_one(
            select(UserModel).where(UserModel.id == user_id.value),
            operation="get_by_id",
        )
        if model is None:
            self._probe.user_not_found(user_id.value)
            return None

        self._probe.user_retrieved(model.id)
        return self._to_domain(model)

    async def get_by_username(self, username: str) -> UserRecord | None:
        """Retrieve a user record by exact username.

        Args:
            username: The username to search for

        Returns:
            The UserRecord aggregate, or None if not found
        """
        model = await self._fetch_one(
            select(UserModel).where(UserModel.username == username),
            operation="get_by_username",
        )
        if model is None:
            self._probe.username_not_found(username)
            return None

        self._probe.user_retrieved(model.id)
        return self._to_domain(model)

    async def get_by_email(self, email: str) -> UserRecord | None:
        """Retrieve a user record by exact email.

        Args:
            email: The email to search for

        Returns:
            The UserRecord aggregate, or None if not found
        """
        model = await self._fetch_one(
            select(UserModel).where(UserModel.email == email),
            operation="get_by_email",
        )
        if model is None:
            self._probe.email_not_found(email)
            return None

        self._probe.user_retrieved(model.id)
        return self._to_domain(model)

    async def delete(self, user_id: UserId) -> bool:
        """Permanently delete a user record.

        Args:
            user_id: The unique identifier of the record

        Returns:
            True if deleted, False if not found
        """
        model = await self._fetch_one(
            select(UserModel).where(UserModel.id == user_id.value),
            operation="delete",
        )
        if model is None:
            self._probe.user_not_found(user_id.value)
            return False

        try:
            await self._session.delete(model)
            await self._session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete user {user_id.value}") from e

        self._probe.user_deleted(user_id.value)
        return True

    async def _fetch_one(self, stmt: Any, operation: str) -> UserModel | None:
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"User lookup failed during {operation}") from e
        return result.scalar_one_or_none()

    async def _flush(self, user: UserRecord, operation: str) -> None:
        """Flush pending changes, translating unique index violations."""
        try:
            await self._session.flush()
        except IntegrityError as e:
            field = _duplicate_field(e)
            if field is None:
                raise StorageError(f"Failed to {operation} user") from e

            self._probe.duplicate_user_field(field.value, user.id.value)
            value = user.username if field is UniqueField.USERNAME else user.email
            raise ConflictError(field.value, value) from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to {operation} user") from e

    @staticmethod
    def _to_domain(model: UserModel) -> UserRecord:
        """Reconstitute a UserRecord aggregate from its row."""
        return UserRecord(
            id=UserId(value=model.id),
            username=model.username,
            email=model.email,
            password=model.password,
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
            metadata=copy.deepcopy(model.attributes or {}),
        )
