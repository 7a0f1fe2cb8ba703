"""
RediSync: shared HTTP response cache on Redis with a write-through bridge
from PostgreSQL mutations to the cache.
"""

from .__version__ import __version__
from .bootstrap import RediSyncComponents, build_components, create_redis_client
from .config import RediSyncSettings, LoggingConfig, setup_logging
from .core.exceptions import (
    RediSyncError,
    ConfigurationError,
    CacheError,
    CacheUnavailableError,
    CacheSerializationError,
    InvalidationCallbackError,
    DatabaseError,
    DatabaseNotInitializedError,
)
from .features.cache import (
    CacheStore,
    CachedResponseEnvelope,
    KeyGenerator,
    KeyInfo,
    RedisCacheStore,
    derive_key,
)
from .features.database import (
    CacheEntry,
    ComputedPlan,
    DatabaseManager,
    StaticPlan,
    WriteThroughCoordinator,
)
from .features.http_cache import (
    CacheOutcome,
    CachePolicy,
    CacheRequest,
    CacheResponse,
    CacheState,
    HttpCacheProtocol,
    TtlPolicy,
)
from .middleware import HttpCacheMiddleware, install_http_cache

__all__ = [
    "__version__",
    # Composition
    "RediSyncComponents",
    "build_components",
    "create_redis_client",
    "RediSyncSettings",
    "LoggingConfig",
    "setup_logging",
    # Exceptions
    "RediSyncError",
    "ConfigurationError",
    "CacheError",
    "CacheUnavailableError",
    "CacheSerializationError",
    "InvalidationCallbackError",
    "DatabaseError",
    "DatabaseNotInitializedError",
    # Cache store
    "CacheStore",
    "CachedResponseEnvelope",
    "KeyGenerator",
    "KeyInfo",
    "RedisCacheStore",
    "derive_key",
    # HTTP cache
    "CacheOutcome",
    "CachePolicy",
    "CacheRequest",
    "CacheResponse",
    "CacheState",
    "HttpCacheProtocol",
    "TtlPolicy",
    "HttpCacheMiddleware",
    "install_http_cache",
    # Database
    "CacheEntry",
    "ComputedPlan",
    "StaticPlan",
    "DatabaseManager",
    "WriteThroughCoordinator",
]
