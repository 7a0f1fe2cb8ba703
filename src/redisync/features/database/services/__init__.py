"""Database services."""

from .database_manager import DatabaseManager, InvalidationCallback, normalize_dsn
from .write_through import WriteThroughCoordinator

__all__ = [
    "DatabaseManager",
    "InvalidationCallback",
    "normalize_dsn",
    "WriteThroughCoordinator",
]
