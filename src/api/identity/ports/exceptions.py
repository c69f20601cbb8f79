"""Port-level exceptions for the identity bounded context.

These exceptions represent errors that can occur during repository
operations or that span more than one record. They are raised to the
caller of the user record store unmodified.
"""

from __future__ import annotations

from identity.domain.exceptions import UserStoreError


class ConflictError(UserStoreError):
    """Raised when a uniqueness constraint would be violated.

    Indicates that another record already holds the given username or
    email. The caller must choose a different value.

    Attributes:
        field: The unique field that collided ("username" or "email")
        value: The value that is already taken
    """

    def __init__(self, field: str, value: str | None = None):
        self.field = field
        self.value = value
        super().__init__(f"A user with this {field} already exists")


class NotFoundError(UserStoreError):
    """Raised when a lookup, update or delete references a missing record.

    Attributes:
        key: What was looked up ("id", "username" or "email")
        value: The value that matched nothing
    """

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"No user with {key} '{value}'")


class StorageError(UserStoreError):
    """Raised when the underlying storage backend fails.

    The original backend exception is chained as ``__cause__``. The store
    does not retry; retry policy belongs to the storage client.
    """

    pass
