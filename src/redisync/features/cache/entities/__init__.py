"""Cache entities - domain objects and protocols."""

from .protocols import CacheStore, KeyValueBackend, Producer
from .key_info import KeyInfo
from .envelope import CachedResponseEnvelope, map_to_headers

__all__ = [
    "CacheStore",
    "KeyValueBackend",
    "Producer",
    "KeyInfo",
    "CachedResponseEnvelope",
    "map_to_headers",
]
