"""Per-request cache states."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .messages import CacheResponse


class CacheState(str, Enum):
    """Where a request ended up in the cache state machine."""
    BYPASS = "bypass"
    HIT = "hit"
    HIT_NOT_MODIFIED = "hit_not_modified"
    MISS_STORE = "miss_store"
    MISS_NOSTORE = "miss_nostore"


@dataclass(frozen=True)
class CacheOutcome:
    """Final state, the response to send and the key that was consulted."""

    state: CacheState
    response: CacheResponse
    key: Optional[str] = None
