"""Cacheability configuration for the HTTP cache."""

import time
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional, Sequence, Tuple

from .ttl_policy import TtlPolicy

DEFAULT_CONTENT_TYPES: Tuple[str, ...] = ("application/json",)

BYPASS_HEADER = "x-bypass-cache"
CACHE_STATUS_HEADER = "X-RediSync-Cache"

# Headers that only make sense for one connection, or that would leak state
# between clients if replayed from a shared cache.
HOP_BY_HOP_HEADERS: FrozenSet[str] = frozenset({
    "connection",
    "keep-alive",
    "proxy-connection",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
    "host",
    "set-cookie",
})

# Recomputed on every serve
GENERATED_HEADERS: FrozenSet[str] = frozenset({
    "content-length",
    "age",
    CACHE_STATUS_HEADER.lower(),
})


@dataclass(frozen=True)
class CachePolicy:
    """What may be stored and for how long.

    ``allowed_content_types`` of None keeps the JSON-only default; a ``"*"``
    entry accepts every content type.
    """

    ttl_policy: TtlPolicy = field(default_factory=lambda: TtlPolicy(default_ttl=300))
    status_whitelist: FrozenSet[int] = frozenset({200})
    allowed_content_types: Optional[Tuple[str, ...]] = None
    bypass_header: str = BYPASS_HEADER
    clock: Callable[[], float] = time.time

    @classmethod
    def create(
        cls,
        default_ttl: int = 300,
        ttl_rules: Sequence[Tuple[str, int]] = (),
        status_whitelist: Sequence[int] = (200,),
        allowed_content_types: Optional[Sequence[str]] = None,
        clock: Callable[[], float] = time.time,
        bypass_header: str = BYPASS_HEADER,
    ) -> "CachePolicy":
        return cls(
            ttl_policy=TtlPolicy(default_ttl, ttl_rules),
            status_whitelist=frozenset(int(status) for status in status_whitelist),
            allowed_content_types=(
                tuple(ct.strip().lower() for ct in allowed_content_types)
                if allowed_content_types is not None else None
            ),
            bypass_header=bypass_header.lower(),
            clock=clock,
        )

    def content_type_allowed(self, content_type: str) -> bool:
        allowed = self.allowed_content_types
        if allowed is None:
            allowed = DEFAULT_CONTENT_TYPES
        if "*" in allowed:
            return True
        if not content_type:
            return False
        lowered = content_type.strip().lower()
        return any(lowered.startswith(prefix) for prefix in allowed)
