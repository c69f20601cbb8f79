"""Repository protocols (ports) for the identity bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates. Implementations are expected to back username and email with
unique indexes so the storage layer acts as the last line of defence
against duplicates.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from identity.domain.aggregates import UserRecord
from identity.domain.value_objects import UserId


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for UserRecord aggregate persistence.

    Implementations never open or commit transactions themselves; the
    application service owns the unit of work.
    """

    async def add(self, user: UserRecord) -> None:
        """Insert a new user record.

        Args:
            user: The UserRecord aggregate to persist

        Raises:
            ConflictError: If the storage unique index rejects the write
            StorageError: If the backend fails
        """
        ...

    async def update(self, user: UserRecord) -> None:
        """Overwrite the stored state of an existing user record.

        Args:
            user: The UserRecord aggregate carrying the new state

        Raises:
            NotFoundError: If no record with this id exists
            ConflictError: If the storage unique index rejects the write
            StorageError: If the backend fails
        """
        ...

    async def get_by_id(self, user_id: UserId) -> UserRecord | None:
        """Retrieve a user record by its ID.

        Args:
            user_id: The unique identifier of the record

        Returns:
            The UserRecord aggregate, or None if not found
        """
        ...

    async def get_by_username(self, username: str) -> UserRecord | None:
        """Retrieve a user record by exact username.

        Args:
            username: The username to search for (case-sensitive)

        Returns:
            The UserRecord aggregate, or None if not found
        """
        ...

    async def get_by_email(self, email: str) -> UserRecord | None:
        """Retrieve a user record by exact email.

        Args:
            email: The email to search for (case-sensitive)

        Returns:
            The UserRecord aggregate, or None if not found
        """
        ...

    async def delete(self, user_id: UserId) -> bool:
        """Permanently delete a user record.

        Args:
            user_id: The unique identifier of the record

        Returns:
            True if deleted, False if not found
        """
        ...
