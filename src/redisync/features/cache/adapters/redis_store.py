"""Redis-backed cache store.

Owns key prefixing and JSON (de)serialization on top of any client that
satisfies KeyValueBackend (redis.asyncio.Redis in production, fakeredis in
tests). Backend failures surface as CacheUnavailableError so callers can
degrade to the uncached path; corrupt payloads are treated as misses.
"""

import inspect
import json
import logging
from typing import Any, List, Optional

from redis.exceptions import RedisError

from ..entities.key_info import KeyInfo
from ..entities.protocols import CacheStore, KeyValueBackend, Producer
from ....core.exceptions import CacheSerializationError, CacheUnavailableError

logger = logging.getLogger(__name__)

_BACKEND_ERRORS = (RedisError, OSError)


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


class RedisCacheStore(CacheStore):
    """Cache store over a Redis-compatible key-value backend."""

    def __init__(self, client: KeyValueBackend, prefix: str = "redisync:", scan_count: int = 100):
        self.client = client
        self.prefix = prefix.rstrip(":") + ":"
        self.scan_count = scan_count

    def _make_key(self, key: str) -> str:
        """Create a prefixed backend key."""
        return f"{self.prefix}{key}"

    def _strip_prefix(self, full_key: Any) -> str:
        name = _text(full_key)
        return name[len(self.prefix):] if name.startswith(self.prefix) else name

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache.

        Returns None for a missing key and for a payload that cannot be
        decoded; the latter is deleted so the next write starts clean.
        """
        full_key = self._make_key(key)
        try:
            raw = await self.client.get(full_key)
        except _BACKEND_ERRORS as e:
            raise CacheUnavailableError(f"Cache get failed: {e}", key=full_key) from e

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding undecodable cache payload for key {full_key}: {e}")
            try:
                await self.client.delete(full_key)
            except _BACKEND_ERRORS as delete_error:
                logger.warning(f"Could not delete corrupt key {full_key}: {delete_error}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Set value in cache. A None value deletes the key."""
        if value is None:
            await self.delete(key)
            return

        full_key = self._make_key(key)
        try:
            payload = json.dumps(value, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise CacheSerializationError(f"Value is not JSON serializable: {e}", key=full_key) from e

        try:
            if ttl is not None and ttl > 0:
                await self.client.set(full_key, payload, ex=int(ttl))
            else:
                await self.client.set(full_key, payload)
        except _BACKEND_ERRORS as e:
            raise CacheUnavailableError(f"Cache set failed: {e}", key=full_key) from e

    async def delete(self, key: str) -> None:
        """Delete value from cache."""
        full_key = self._make_key(key)
        try:
            await self.client.delete(full_key)
        except _BACKEND_ERRORS as e:
            raise CacheUnavailableError(f"Cache delete failed: {e}", key=full_key) from e

    async def clear_by_pattern(self, pattern: str = "*") -> int:
        """Delete all keys matching a pattern.

        Walks the keyspace with SCAN so large deletions never block the
        backend. Keys written or removed concurrently may be missed.
        """
        full_pattern = self._make_key(pattern)
        deleted = 0
        cursor = 0
        try:
            while True:
                cursor, keys = await self.client.scan(cursor, match=full_pattern, count=self.scan_count)
                if keys:
                    deleted += await self.client.delete(*keys)
                if int(cursor) == 0:
                    break
        except _BACKEND_ERRORS as e:
            raise CacheUnavailableError(f"Cache clear failed after {deleted} keys: {e}") from e

        logger.info(f"Cleared {deleted} cache keys matching {full_pattern}")
        return deleted

    async def list_keys(self, pattern: str = "*", limit: int = 1000) -> List[str]:
        """List keys matching a pattern, without the store prefix."""
        full_pattern = self._make_key(pattern)
        results: List[str] = []
        if limit <= 0:
            return results

        cursor = 0
        try:
            while True:
                cursor, keys = await self.client.scan(cursor, match=full_pattern, count=self.scan_count)
                for full_key in keys:
                    results.append(self._strip_prefix(full_key))
                    if len(results) >= limit:
                        return results
                if int(cursor) == 0:
                    return results
        except _BACKEND_ERRORS as e:
            raise CacheUnavailableError(f"Cache key listing failed: {e}") from e

    async def key_info(self, key: str) -> KeyInfo:
        """Describe a key: TTL, type, size and existence."""
        full_key = self._make_key(key)
        try:
            ttl = await self.client.ttl(full_key)
            key_type = _text(await self.client.type(full_key))
            size = await self.client.strlen(full_key) if key_type == "string" else 0
            exists = await self.client.exists(full_key) == 1
        except _BACKEND_ERRORS as e:
            raise CacheUnavailableError(f"Cache key info failed: {e}", key=full_key) from e

        return KeyInfo(key=key, ttl=int(ttl), type=key_type, size=int(size), exists=exists)

    async def get_or_compute(self, key: str, ttl: Optional[int], producer: Producer) -> Any:
        """Return the cached value or compute it once and store it.

        There is no distributed lock: two callers missing the same key at the
        same time both run the producer and the last write wins. A producer
        result of None is returned but not cached.
        """
        try:
            cached = await self.get(key)
        except CacheUnavailableError as e:
            logger.warning(f"Cache read failed for {key}, computing value: {e.message}")
            cached = None

        if cached is not None:
            return cached

        value = producer()
        if inspect.isawaitable(value):
            value = await value

        if value is not None:
            try:
                await self.set(key, value, ttl)
            except CacheUnavailableError as e:
                logger.warning(f"Cache write failed for {key}: {e.message}")
        return value

    async def health_check(self) -> bool:
        """Check backend health."""
        try:
            await self.client.ping()
            return True
        except _BACKEND_ERRORS as e:
            logger.error(f"Cache health check failed: {e}")
            return False
