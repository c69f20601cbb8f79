"""Database-specific exceptions for the storage handle."""


class DatabaseError(Exception):
    """Base exception for database handle operations."""

    pass


class SchemaError(DatabaseError):
    """Raised when the schema cannot be created or verified."""

    pass
