"""HTTP cache entities."""

from .messages import CacheRequest, CacheResponse, HeaderPairs
from .state import CacheState, CacheOutcome
from .ttl_policy import TtlPolicy, TtlRule
from .policy import (
    CachePolicy,
    DEFAULT_CONTENT_TYPES,
    BYPASS_HEADER,
    CACHE_STATUS_HEADER,
    HOP_BY_HOP_HEADERS,
    GENERATED_HEADERS,
)

__all__ = [
    "CacheRequest",
    "CacheResponse",
    "HeaderPairs",
    "CacheState",
    "CacheOutcome",
    "TtlPolicy",
    "TtlRule",
    "CachePolicy",
    "DEFAULT_CONTENT_TYPES",
    "BYPASS_HEADER",
    "CACHE_STATUS_HEADER",
    "HOP_BY_HOP_HEADERS",
    "GENERATED_HEADERS",
]
