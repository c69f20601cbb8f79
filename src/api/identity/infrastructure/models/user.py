"""SQLAlchemy ORM model for the users table.

Each row is one user record. The open-ended metadata part of the record
lives in a JSON column so it can hold arbitrary nested values.
"""

from typing import Any

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class UserModel(Base, TimestampMixin):
    """ORM model for users table.

    username and email each carry a unique index (ix_users_username,
    ix_users_email) which backs the uniqueness rules at the storage level.

    Note: ``metadata`` is reserved on declarative classes, so the attribute
    is ``attributes`` while the column keeps the name ``metadata``.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    username: Mapped[str] = mapped_column(
        Text, nullable=False, unique=True, index=True
    )
    email: Mapped[str] = mapped_column(
        Text, nullable=False, unique=True, index=True
    )
    password: Mapped[str] = mapped_column(Text, nullable=False)
    attributes: Mapped[dict[str, Any]] = mapped_column(
        "metadata", nullable=False, default=dict
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<UserModel(id={self.id}, username={self.username})>"
