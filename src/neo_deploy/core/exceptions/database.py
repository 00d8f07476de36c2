"""Database-related exceptions for neo-deploy."""

from .base import NeoDeployError


class DatabaseError(NeoDeployError):
    """Base class for database-related errors."""
    pass


class QueryError(DatabaseError):
    """Raised when database query execution fails."""
    pass


class TransactionError(DatabaseError):
    """Raised when a database transaction fails or cannot be serialized."""
    pass
