"""Value objects for the identity domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class UserId:
    """Identifier for a UserRecord aggregate.

    Uses ULID for sortability and distribution-friendly generation. A fresh
    ULID is drawn for every record, so identifiers are never reused after
    a record is deleted.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> UserId:
        """Generate a new UserId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from string value.

        Args:
            value: ULID string

        Returns:
            UserId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid UserId: {value}") from e

        return cls(value=value)


class UserField(StrEnum):
    """Caller-writable fields of a user record."""

    USERNAME = "username"
    EMAIL = "email"
    PASSWORD = "password"
    METADATA = "metadata"


class ValidationRule(StrEnum):
    """Rules a candidate field value can violate."""

    REQUIRED = "required"
    FORMAT = "format"
    TYPE = "type"
    UNKNOWN_FIELD = "unknown_field"


class UniqueField(StrEnum):
    """Fields backed by a uniqueness index."""

    USERNAME = "username"
    EMAIL = "email"
