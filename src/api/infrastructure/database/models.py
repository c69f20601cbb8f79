"""SQLAlchemy declarative base and shared model utilities.

This module provides the declarative base class for all SQLAlchemy ORM models
and the timestamp mixin shared by records that track creation and mutation.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    """Generate UTC timestamp for database defaults.

    Uses a named function instead of lambda for SQLAlchemy 2.0 compatibility.
    Only used when the domain layer did not supply a value.
    """
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models.

    Open-ended ``dict`` columns map to the portable JSON type, which becomes
    native JSON on PostgreSQL.
    """

    type_annotation_map: dict[type, Any] = {
        dict[str, Any]: JSON,
    }


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamp columns.

    Aggregates set both columns explicitly so that created_at equals
    updated_at on insert. The Python-side defaults only cover rows written
    outside the domain layer.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,
        nullable=False,
    )
