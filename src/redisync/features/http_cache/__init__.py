"""HTTP cache feature for redisync.

- entities/: request/response values, cache states, TTL and cacheability policy
- services/: the HttpCacheProtocol state machine
"""

from .entities import (
    CacheRequest,
    CacheResponse,
    CacheState,
    CacheOutcome,
    CachePolicy,
    TtlPolicy,
)
from .services import HttpCacheProtocol

__all__ = [
    "CacheRequest",
    "CacheResponse",
    "CacheState",
    "CacheOutcome",
    "CachePolicy",
    "TtlPolicy",
    "HttpCacheProtocol",
]
