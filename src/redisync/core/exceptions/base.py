"""Base exceptions for redisync.

All exceptions raised by the library inherit from RediSyncError and carry an
error code plus a details mapping so callers can log them in a structured way.
"""

from typing import Any, Dict, Optional


class RediSyncError(Exception):
    """Base exception for all redisync errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ConfigurationError(RediSyncError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if config_key:
            self.details["config_key"] = config_key

