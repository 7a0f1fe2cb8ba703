"""
Composition root: builds every redisync component from settings.

Nothing here is a module-level singleton; applications keep the returned
RediSyncComponents for their lifetime and close it on shutdown.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import redis.asyncio as redis

from .config.logging_config import setup_logging
from .config.settings import RediSyncSettings
from .features.cache.adapters.redis_store import RedisCacheStore
from .features.cache.utils.key_generator import KeyGenerator
from .features.database.services.database_manager import DatabaseManager
from .features.database.services.write_through import WriteThroughCoordinator
from .features.http_cache.entities.policy import CachePolicy
from .features.http_cache.services.http_cache_protocol import HttpCacheProtocol

logger = logging.getLogger(__name__)


@dataclass
class RediSyncComponents:
    """Everything an application needs, wired together."""

    settings: RediSyncSettings
    redis: redis.Redis
    cache_store: RedisCacheStore
    key_generator: KeyGenerator
    http_cache: HttpCacheProtocol
    database: DatabaseManager
    write_through: WriteThroughCoordinator

    async def aclose(self) -> None:
        """Close the database pool and the Redis connection pool."""
        await self.database.close_pool()
        await self.redis.aclose()
        logger.info("RediSync components closed")


def create_redis_client(settings: RediSyncSettings) -> redis.Redis:
    """Create a Redis client from settings. Connections are opened lazily."""
    return redis.Redis.from_url(
        settings.redis_url,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_timeout,
    )


def build_components(
    settings: Optional[RediSyncSettings] = None,
    redis_client: Optional[redis.Redis] = None,
    database: Optional[DatabaseManager] = None,
    configure_logging: bool = False,
) -> RediSyncComponents:
    """Wire the cache store, HTTP cache and write-through bridge.

    Args:
        settings: Settings to use; read from the environment when omitted
        redis_client: Existing client (fakeredis in tests)
        database: Existing database manager
        configure_logging: Apply the logging configuration from settings

    Raises:
        ConfigurationError: If a list, TTL map or DSN setting is invalid
    """
    settings = settings or RediSyncSettings()

    if configure_logging:
        setup_logging(
            log_level=settings.log_level,
            verbosity=settings.log_verbosity,
            log_format=settings.log_format,
        )

    client = redis_client if redis_client is not None else create_redis_client(settings)
    cache_store = RedisCacheStore(client, prefix=settings.redis_prefix)
    key_generator = KeyGenerator(prefix=settings.cache_key_prefix, ignored_params=settings.ignored_params)
    policy = CachePolicy.create(
        default_ttl=settings.cache_ttl,
        ttl_rules=settings.ttl_rules,
        status_whitelist=settings.status_whitelist,
        allowed_content_types=settings.allowed_content_types,
    )
    http_cache = HttpCacheProtocol(cache_store, key_generator, policy)

    database = database or DatabaseManager.from_settings(settings)
    write_through = WriteThroughCoordinator(database)

    logger.info(
        f"RediSync configured: prefix={cache_store.prefix} default_ttl={settings.cache_ttl}s "
        f"ttl_rules={len(policy.ttl_policy.rules)}"
    )
    return RediSyncComponents(
        settings=settings,
        redis=client,
        cache_store=cache_store,
        key_generator=key_generator,
        http_cache=http_cache,
        database=database,
        write_through=write_through,
    )
