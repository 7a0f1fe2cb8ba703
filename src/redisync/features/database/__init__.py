"""Database feature for redisync.

- entities/: cache plans returned by write handlers
- services/: asyncpg database manager and the write-through coordinator
- utils/: parameter compilation and command tag parsing
"""

from .entities import CacheEntry, StaticPlan, ComputedPlan, as_plan
from .services import DatabaseManager, WriteThroughCoordinator

__all__ = [
    "CacheEntry",
    "StaticPlan",
    "ComputedPlan",
    "as_plan",
    "DatabaseManager",
    "WriteThroughCoordinator",
]
