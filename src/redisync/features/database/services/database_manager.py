"""
Database access using asyncpg for the write-through bridge.
"""
import inspect
import logging
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar, Union

import asyncpg
from asyncpg import Connection, Pool

from ..utils.sql import Params, affected_rows, compile_params, is_mutation
from ....core.exceptions import (
    ConfigurationError,
    DatabaseNotInitializedError,
    InvalidationCallbackError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

InvalidationCallback = Callable[[str, Params], Union[None, Awaitable[None]]]
TransactionCallback = Callable[[Connection], Union[T, Awaitable[T]]]


def normalize_dsn(dsn: str) -> str:
    """Strip SQLAlchemy-style driver suffixes and map legacy schemes."""
    dsn = dsn.strip()
    if "+asyncpg" in dsn:
        dsn = dsn.replace("+asyncpg", "")
    if dsn.startswith("pgsql://"):
        dsn = "postgresql://" + dsn[len("pgsql://"):]
    return dsn


class DatabaseManager:
    """Manages the connection pool, statement execution and invalidation hooks."""

    def __init__(self, database_url: str, pool: Optional[Pool] = None, **pool_config):
        """Initialize DatabaseManager.

        Args:
            database_url: PostgreSQL DSN
            pool: Already created pool (tests inject a mock here)
            **pool_config: Additional pool configuration options
        """
        if not database_url or not database_url.strip():
            raise ConfigurationError("Database DSN url must be provided", config_key="DATABASE_URL")
        self.dsn = normalize_dsn(database_url)
        self.pool: Optional[Pool] = pool
        self._invalidation_callbacks: List[InvalidationCallback] = []

        # Pool configuration with sensible defaults
        self.pool_config = {
            "min_size": 1,
            "max_size": 10,
            "command_timeout": 60,
            **pool_config
        }

    @classmethod
    def from_dsn(cls, dsn: str, **pool_config) -> "DatabaseManager":
        return cls(dsn, **pool_config)

    @classmethod
    def from_settings(cls, settings) -> "DatabaseManager":
        return cls(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )

    async def create_pool(self) -> Pool:
        """Create and return a connection pool."""
        if self.pool is None:
            logger.info(f"Creating database pool with size {self.pool_config['max_size']}")
            try:
                self.pool = await asyncpg.create_pool(self.dsn, **self.pool_config)
            except (OSError, asyncpg.PostgresError) as e:
                raise DatabaseNotInitializedError(str(e)) from e
            logger.info("Database pool created successfully")
        return self.pool

    async def close_pool(self) -> None:
        """Close the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Database pool closed")

    @asynccontextmanager
    async def acquire(self):
        """Acquire a connection from the pool."""
        pool = await self.create_pool()
        async with pool.acquire() as connection:
            yield connection

    @asynccontextmanager
    async def transaction(self):
        """Create a transaction context; commits on exit, rolls back on error."""
        async with self.acquire() as connection:
            async with connection.transaction():
                yield connection

    async def fetch_one(self, sql: str, params: Params = None) -> Optional[Dict[str, Any]]:
        """Fetch a single row as a dict, or None."""
        query, args = compile_params(sql, params)
        async with self.acquire() as connection:
            row = await connection.fetchrow(query, *args)
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, params: Params = None) -> List[Dict[str, Any]]:
        """Fetch every row as a list of dicts."""
        query, args = compile_params(sql, params)
        async with self.acquire() as connection:
            rows = await connection.fetch(query, *args)
        return [dict(row) for row in rows]

    async def execute(self, sql: str, params: Params = None) -> int:
        """Execute a statement and return the number of affected rows.

        Mutating statements notify the invalidation callbacks once they have
        completed successfully.
        """
        query, args = compile_params(sql, params)
        async with self.acquire() as connection:
            status = await connection.execute(query, *args)
        affected = affected_rows(status)
        await self.notify_mutation(sql, params)
        return affected

    async def transactional(self, callback: TransactionCallback) -> Any:
        """Run ``callback(connection)`` inside a transaction and return its result."""
        async with self.transaction() as connection:
            result = callback(connection)
            if inspect.isawaitable(result):
                result = await result
            return result

    def on_invalidate(self, callback: InvalidationCallback) -> None:
        """Register a callback run after data-changing statements (INSERT/UPDATE/DELETE)."""
        self._invalidation_callbacks.append(callback)

    async def notify_mutation(self, sql: str, params: Params = None) -> None:
        """Run invalidation callbacks for a mutating statement.

        Callback failures are logged and never propagate to the caller.
        """
        if not is_mutation(sql):
            return
        for callback in list(self._invalidation_callbacks):
            try:
                result = callback(sql, params)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                error = InvalidationCallbackError(getattr(callback, "__name__", repr(callback)), e)
                logger.error(error.message, exc_info=e)

    async def health_check(self) -> bool:
        """Check database health."""
        try:
            async with self.acquire() as connection:
                result = await connection.fetchval("SELECT 1")
                return result == 1
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
