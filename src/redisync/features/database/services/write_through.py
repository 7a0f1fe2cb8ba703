"""Write-through coordination between a database mutation and the cache.

The statement runs inside a transaction. The plan is resolved inside that
same transaction so it can read back what was just written, but the cache is
only touched after the commit: a rollback never leaves cache entries behind.
A crash between commit and cache write leaves the cache stale until the
entries expire; no two-phase commit is attempted.
"""

import logging
from typing import List, Optional, Union

from ..entities.cache_plan import CacheEntry, CachePlan, PlanEntries, PlanFunction, as_plan
from ..utils.sql import Params, affected_rows, compile_params
from .database_manager import DatabaseManager
from ...cache.entities.protocols import CacheStore
from ....core.exceptions import CacheError

logger = logging.getLogger(__name__)


class WriteThroughCoordinator:
    """Applies a cache plan after a successful database mutation."""

    def __init__(self, database: DatabaseManager):
        self.database = database

    async def write_through(
        self,
        sql: str,
        params: Params,
        cache_store: CacheStore,
        plan: Union[CachePlan, PlanFunction, PlanEntries],
        default_ttl: Optional[int] = None,
    ) -> int:
        """Execute ``sql`` and mirror the plan into the cache on commit.

        Returns:
            Number of rows affected by the statement.

        Raises:
            Whatever the database driver raises; nothing is written to the
            cache in that case.
        """
        resolved_plan = as_plan(plan)
        query, args = compile_params(sql, params)

        entries: List[CacheEntry] = []
        async with self.database.transaction() as connection:
            status = await connection.execute(query, *args)
            affected = affected_rows(status)
            if affected > 0:
                entries = await resolved_plan.resolve(affected, params, connection, default_ttl)

        # Committed from here on
        await self.database.notify_mutation(sql, params)

        if entries:
            failed = await self.apply(cache_store, entries)
            if failed:
                logger.error(
                    f"Write-through applied {len(entries) - failed}/{len(entries)} cache entries "
                    f"after commit; {failed} failed and were not retried"
                )
        return affected

    async def apply(self, cache_store: CacheStore, entries: List[CacheEntry]) -> int:
        """Apply entries one by one and return how many failed."""
        failed = 0
        for entry in entries:
            try:
                if entry.value is None:
                    await cache_store.delete(entry.key)
                else:
                    await cache_store.set(entry.key, entry.value, entry.ttl)
            except CacheError as e:
                failed += 1
                logger.warning(f"Write-through cache update for {entry.key} failed: {e.message}")
        return failed
