"""Cache-related exceptions.

Cache failures are never fatal to request handling: callers catch these,
log them and fall back to the uncached path.
"""

from typing import Optional

from .base import RediSyncError


class CacheError(RediSyncError):
    """Base class for cache-related errors."""
    pass


class CacheUnavailableError(CacheError):
    """Raised when the key-value backend cannot be reached or times out."""

    def __init__(self, message: str = "Cache backend unavailable", key: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if key:
            self.details["key"] = key


class CacheSerializationError(CacheError):
    """Raised when a cache value cannot be serialized or deserialized."""

    def __init__(self, message: str = "Cache payload is not valid", key: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if key:
            self.details["key"] = key


class InvalidationCallbackError(CacheError):
    """Wraps a failure raised by a registered invalidation callback."""

    def __init__(self, callback_name: str, error: BaseException):
        self.callback_name = callback_name
        self.original_error = error
        super().__init__(
            f"Invalidation callback '{callback_name}' failed: {error}",
            details={"callback": callback_name},
        )
