"""Database infrastructure - shared connection primitives."""

from infrastructure.database.connection import Database
from infrastructure.database.exceptions import DatabaseError, SchemaError

__all__ = [
    "Database",
    "DatabaseError",
    "SchemaError",
]
