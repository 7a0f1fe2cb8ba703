"""HTTP response cache state machine.

Decides per request whether to bypass the cache, serve a stored envelope
(possibly as 304 Not Modified) or run the downstream handler and store its
response. Downstream handler errors always propagate; cache store errors
never fail a request, the protocol falls back to computing the response.
"""

import hashlib
import logging
from typing import Awaitable, Callable, List, Optional, Tuple

from ..entities.messages import CacheRequest, CacheResponse, HeaderPairs
from ..entities.policy import (
    CACHE_STATUS_HEADER,
    GENERATED_HEADERS,
    HOP_BY_HOP_HEADERS,
    CachePolicy,
)
from ..entities.state import CacheOutcome, CacheState
from ...cache.entities.envelope import CachedResponseEnvelope
from ...cache.entities.protocols import CacheStore
from ...cache.utils.key_generator import KeyGenerator
from ....core.exceptions import CacheError, CacheSerializationError

logger = logging.getLogger(__name__)

Handler = Callable[[CacheRequest], Awaitable[CacheResponse]]

CACHEABLE_METHODS = frozenset({"GET", "HEAD"})


def cache_control_directives(value: str) -> List[str]:
    """Lower-cased directive names of a Cache-Control header value."""
    directives = []
    for part in value.split(","):
        name = part.split("=", 1)[0].strip().lower()
        if name:
            directives.append(name)
    return directives


def _opaque_tag(tag: str) -> str:
    tag = tag.strip()
    return tag[2:] if tag.startswith("W/") else tag


def if_none_match_satisfied(if_none_match: str, etag: str) -> bool:
    """Weak comparison of an If-None-Match list against a stored ETag."""
    current = _opaque_tag(etag)
    for candidate in if_none_match.split(","):
        candidate = candidate.strip()
        if candidate == "*":
            return True
        if candidate and _opaque_tag(candidate) == current:
            return True
    return False


def compute_etag(body: bytes) -> str:
    """Strong validator derived from the response body."""
    return '"' + hashlib.md5(body, usedforsecurity=False).hexdigest() + '"'


def sanitize_headers(headers: HeaderPairs) -> HeaderPairs:
    """Drop hop-by-hop, credential-bearing and generated headers."""
    # Connection may nominate additional hop-by-hop headers
    nominated = set()
    for name, value in headers:
        if name.lower() == "connection":
            nominated.update(token.strip().lower() for token in value.split(",") if token.strip())
    dropped = HOP_BY_HOP_HEADERS | GENERATED_HEADERS | nominated
    return [(name, value) for name, value in headers if name.lower() not in dropped]


class HttpCacheProtocol:
    """Shared HTTP cache in front of a request handler."""

    def __init__(
        self,
        store: CacheStore,
        key_generator: KeyGenerator,
        policy: Optional[CachePolicy] = None,
    ):
        self.store = store
        self.key_generator = key_generator
        self.policy = policy or CachePolicy()

    # Request side

    def bypass_reason(self, request: CacheRequest) -> Optional[str]:
        """Return why a request must skip the cache, or None."""
        if request.method.upper() not in CACHEABLE_METHODS:
            return "method"
        if request.header(self.policy.bypass_header) == "1":
            return "bypass-header"
        if "no-store" in cache_control_directives(request.header("cache-control")):
            return "no-store"
        # Responses tied to a principal must never land in the shared cache
        if request.header("authorization") or request.header("cookie").strip():
            return "credentials"
        return None

    def cache_key(self, request: CacheRequest) -> str:
        """HEAD shares the GET key so both methods share cache space."""
        return self.key_generator.from_parts("GET", request.path, request.query_params)

    # Response side

    def is_cacheable(self, response: CacheResponse) -> bool:
        """Status, content type and Cache-Control checks for storing."""
        if response.status not in self.policy.status_whitelist:
            return False
        if not self.policy.content_type_allowed(response.header("content-type")):
            return False
        directives = cache_control_directives(response.header("cache-control"))
        if "no-store" in directives or "private" in directives:
            return False
        return True

    async def process(self, request: CacheRequest, handler: Handler) -> CacheOutcome:
        """Run one request through the cache."""
        reason = self.bypass_reason(request)
        if reason is not None:
            logger.debug(f"Cache bypass ({reason}) for {request.method} {request.path}")
            return CacheOutcome(CacheState.BYPASS, await handler(request))

        key = self.cache_key(request)
        envelope = await self._lookup(key)
        if envelope is not None:
            return self._serve_hit(request, envelope, key)

        response = await handler(request)
        response = response.with_header(CACHE_STATUS_HEADER, "MISS")

        if not self.is_cacheable(response):
            return CacheOutcome(CacheState.MISS_NOSTORE, response, key)

        is_get = request.method.upper() == "GET"
        etag = response.header("etag") or None
        if etag is None and is_get:
            etag = compute_etag(response.body)
            response = response.with_header("ETag", etag)

        if not is_get:
            # HEAD responses have no body worth persisting
            return CacheOutcome(CacheState.MISS_NOSTORE, response, key)

        ttl = self.policy.ttl_policy.resolve(request.path)
        stored = await self._store(key, response, etag, ttl)
        state = CacheState.MISS_STORE if stored else CacheState.MISS_NOSTORE
        return CacheOutcome(state, response, key)

    async def invalidate(self, pattern: str = "*") -> int:
        """Delete stored entries whose key matches ``pattern``."""
        try:
            return await self.store.clear_by_pattern(pattern)
        except CacheError as e:
            logger.error(f"Cache invalidation for {pattern} failed: {e.message}")
            return 0

    # Internals

    async def _lookup(self, key: str) -> Optional[CachedResponseEnvelope]:
        try:
            raw = await self.store.get(key)
        except CacheError as e:
            logger.warning(f"Cache read failed for {key}, treating as miss: {e.message}")
            return None
        if raw is None:
            return None
        try:
            return CachedResponseEnvelope.from_dict(raw)
        except CacheSerializationError as e:
            logger.warning(f"Dropping malformed cache entry {key}: {e.message}")
            try:
                await self.store.delete(key)
            except CacheError as delete_error:
                logger.warning(f"Could not delete malformed entry {key}: {delete_error.message}")
            return None

    def _serve_hit(self, request: CacheRequest, envelope: CachedResponseEnvelope, key: str) -> CacheOutcome:
        age = max(0, int(self.policy.clock() - envelope.stored_at))
        meta: List[Tuple[str, str]] = [
            ("Age", str(age)),
            (CACHE_STATUS_HEADER, "HIT"),
        ]

        if_none_match = request.header("if-none-match")
        if if_none_match and envelope.etag and if_none_match_satisfied(if_none_match, envelope.etag):
            headers = [("ETag", envelope.etag)] + meta
            return CacheOutcome(CacheState.HIT_NOT_MODIFIED, CacheResponse(304, headers, b""), key)

        headers = sanitize_headers(envelope.header_pairs())
        headers.append(("Content-Length", str(len(envelope.body))))
        headers.extend(meta)

        if request.method.upper() == "HEAD":
            return CacheOutcome(CacheState.HIT, CacheResponse(envelope.status, headers, b""), key)
        return CacheOutcome(CacheState.HIT, CacheResponse(envelope.status, headers, envelope.body), key)

    async def _store(self, key: str, response: CacheResponse, etag: Optional[str], ttl: int) -> bool:
        envelope = CachedResponseEnvelope(
            status=response.status,
            headers=CacheResponse(response.status, sanitize_headers(response.headers)).header_map(),
            body=response.body,
            stored_at=self.policy.clock(),
            etag=etag,
        )
        try:
            await self.store.set(key, envelope.to_dict(), ttl)
        except CacheError as e:
            logger.error(f"Cache write failed for {key}: {e.message}")
            return False
        return True
