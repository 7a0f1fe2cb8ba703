"""Cache feature for redisync.

- entities/: envelope, key info and the store/backend protocols
- adapters/: Redis-backed cache store
- utils/: deterministic request key derivation
"""

from .entities import CacheStore, KeyValueBackend, KeyInfo, CachedResponseEnvelope
from .adapters import RedisCacheStore
from .utils import KeyGenerator, derive_key

__all__ = [
    "CacheStore",
    "KeyValueBackend",
    "KeyInfo",
    "CachedResponseEnvelope",
    "RedisCacheStore",
    "KeyGenerator",
    "derive_key",
]
