"""UserRecord aggregate for the identity context."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from identity.domain.exceptions import ValidationError
from identity.domain.value_objects import UserField, UserId, ValidationRule

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_REQUIRED_MESSAGES = {
    UserField.USERNAME: "Username is required",
    UserField.EMAIL: "Email is required",
    UserField.PASSWORD: "Password is required",
}

_WRITABLE_FIELDS = frozenset(f.value for f in UserField)


def _clean_text(name: UserField, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(
            name, ValidationRule.TYPE, f"{name.capitalize()} must be a string"
        )
    value = value.strip()
    if not value:
        raise ValidationError(name, ValidationRule.REQUIRED, _REQUIRED_MESSAGES[name])
    return value


def _clean_email(value: Any) -> str:
    value = _clean_text(UserField.EMAIL, value)
    if EMAIL_PATTERN.fullmatch(value) is None:
        raise ValidationError(
            UserField.EMAIL,
            ValidationRule.FORMAT,
            "Please enter a valid email address",
        )
    return value


def _has_non_str_key(value: Any) -> bool:
    if isinstance(value, Mapping):
        return any(
            not isinstance(key, str) or _has_non_str_key(item)
            for key, item in value.items()
        )
    if isinstance(value, list | tuple):
        return any(_has_non_str_key(item) for item in value)
    return False


def _clean_metadata(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError(
            UserField.METADATA, ValidationRule.TYPE, "Metadata must be a mapping"
        )
    if _has_non_str_key(value):
        raise ValidationError(
            UserField.METADATA,
            ValidationRule.TYPE,
            "Metadata keys must be strings",
        )
    try:
        encoded = json.dumps(dict(value), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            UserField.METADATA,
            ValidationRule.TYPE,
            "Metadata values must be JSON-serializable",
        ) from e
    # Decoding again yields a fresh copy shaped exactly like the stored value
    return json.loads(encoded)


@dataclass(frozen=True)
class UserRecord:
    """UserRecord aggregate representing one stored user.

    Business rules:
    - username, email and password are required and stored trimmed
    - email must look like local-part@domain.tld
    - metadata is an open JSON object (string keys, JSON values) with no
      enforced schema
    - created_at never changes; updated_at is refreshed on every mutation
      and never moves backwards

    Uniqueness of username and email spans all records, so it is enforced
    by the application service and the storage indexes rather than here.

    The password is kept exactly as supplied (after trimming). No hashing
    is applied.
    """

    id: UserId
    username: str
    email: str
    password: str = field(repr=False)
    created_at: datetime
    updated_at: datetime
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        username: Any,
        email: Any,
        password: Any,
        metadata: Any = None,
        *,
        now: datetime | None = None,
    ) -> UserRecord:
        """Factory method for creating a new, validated user record.

        Fields are checked in a fixed order: username, email, password,
        metadata. The first violation wins.

        Args:
            username: Candidate username
            email: Candidate email address
            password: Candidate password
            metadata: Optional open-ended mapping (defaults to empty)
            now: Creation timestamp (defaults to current UTC time)

        Returns:
            A new UserRecord with a fresh id and created_at == updated_at

        Raises:
            ValidationError: If any field rule fails
        """
        clean_username = _clean_text(UserField.USERNAME, username)
        clean_email = _clean_email(email)
        clean_password = _clean_text(UserField.PASSWORD, password)
        clean_metadata = _clean_metadata(metadata)

        timestamp = now or datetime.now(UTC)
        return cls(
            id=UserId.generate(),
            username=clean_username,
            email=clean_email,
            password=clean_password,
            created_at=timestamp,
            updated_at=timestamp,
            metadata=clean_metadata,
        )

    def with_changes(
        self, changes: Mapping[str, Any], *, now: datetime | None = None
    ) -> UserRecord:
        """Return a copy of this record with the supplied fields replaced.

        Only the fields present in ``changes`` are validated. The original
        record is left untouched, so a failed update has no effect.

        Args:
            changes: Subset of username, email, password, metadata
            now: Mutation timestamp (defaults to current UTC time)

        Returns:
            The updated UserRecord with a refreshed updated_at

        Raises:
            ValidationError: If a key is not writable or a value is invalid
        """
        for key in changes:
            if key not in _WRITABLE_FIELDS:
                raise ValidationError(
                    key,
                    ValidationRule.UNKNOWN_FIELD,
                    f"Field '{key}' cannot be updated",
                )

        cleaned: dict[str, Any] = {}
        if UserField.USERNAME in changes:
            cleaned["username"] = _clean_text(
                UserField.USERNAME, changes[UserField.USERNAME]
            )
        if UserField.EMAIL in changes:
            cleaned["email"] = _clean_email(changes[UserField.EMAIL])
        if UserField.PASSWORD in changes:
            cleaned["password"] = _clean_text(
                UserField.PASSWORD, changes[UserField.PASSWORD]
            )
        if UserField.METADATA in changes:
            cleaned["metadata"] = _clean_metadata(changes[UserField.METADATA])

        timestamp = now or datetime.now(UTC)
        return replace(self, **cleaned, updated_at=max(timestamp, self.updated_at))

    def __str__(self) -> str:
        """Return string representation."""
        return f"UserRecord({self.username})"

    def __eq__(self, other: object) -> bool:
        """Records are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, UserRecord):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
