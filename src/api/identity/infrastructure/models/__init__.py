"""ORM models for the identity bounded context."""

from identity.infrastructure.models.user import UserModel

__all__ = ["UserModel"]
