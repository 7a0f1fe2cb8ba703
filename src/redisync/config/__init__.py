"""Configuration for redisync: environment settings and logging."""

from .settings import RediSyncSettings
from .logging_config import LoggingConfig, setup_logging

__all__ = [
    "RediSyncSettings",
    "LoggingConfig",
    "setup_logging",
]
