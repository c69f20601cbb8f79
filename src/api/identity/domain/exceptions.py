"""Domain exceptions for the identity bounded context.

Raised by the UserRecord aggregate when a candidate value breaks a field
rule. Nothing is persisted when one of these is raised.
"""

from __future__ import annotations


class UserStoreError(Exception):
    """Base exception for all user record store errors."""

    pass


class ValidationError(UserStoreError):
    """Raised when a required-field or format rule fails.

    Recoverable by the caller by correcting the input.

    Attributes:
        field: Name of the offending field
        rule: Name of the violated rule (see ValidationRule)
    """

    def __init__(self, field: str, rule: str, message: str | None = None):
        self.field = field
        self.rule = rule
        super().__init__(message or f"Field '{field}' violates rule '{rule}'")
