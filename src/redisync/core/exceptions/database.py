"""Database-related exceptions for redisync.

Driver errors (asyncpg.PostgresError and friends) are deliberately not wrapped;
they reach the caller unchanged.
"""

from .base import RediSyncError


class DatabaseError(RediSyncError):
    """Base class for database-related errors."""
    pass


class DatabaseNotInitializedError(DatabaseError):
    """Raised when the connection pool could not be created."""

    def __init__(self, reason: str = ""):
        message = "Database pool is not available"
        if reason:
            message += f": {reason}"
        super().__init__(message)
