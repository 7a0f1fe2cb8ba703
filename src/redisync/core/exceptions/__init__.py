"""Exception hierarchy for redisync."""

from .base import (
    RediSyncError,
    ConfigurationError,
)

from .infrastructure import (
    CacheError,
    CacheUnavailableError,
    CacheSerializationError,
    InvalidationCallbackError,
)

from .database import (
    DatabaseError,
    DatabaseNotInitializedError,
)

__all__ = [
    "RediSyncError",
    "ConfigurationError",
    # Cache
    "CacheError",
    "CacheUnavailableError",
    "CacheSerializationError",
    "InvalidationCallbackError",
    # Database
    "DatabaseError",
    "DatabaseNotInitializedError",
]
