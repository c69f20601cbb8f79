"""Domain aggregates for the identity context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from identity.domain.aggregates.user import EMAIL_PATTERN, UserRecord

__all__ = [
    "EMAIL_PATTERN",
    "UserRecord",
]
