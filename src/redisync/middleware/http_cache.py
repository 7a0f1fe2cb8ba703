"""
Starlette/FastAPI adapter for the HTTP response cache.
"""
import logging
from typing import Callable, List, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..features.cache.utils.key_generator import params_from_pairs
from ..features.http_cache.entities.messages import CacheRequest, CacheResponse
from ..features.http_cache.services.http_cache_protocol import HttpCacheProtocol

logger = logging.getLogger(__name__)

_BODYLESS_STATUSES = {204, 304}


def to_cache_request(request: Request) -> CacheRequest:
    """Project a Starlette request onto the values the cache looks at."""
    return CacheRequest.build(
        method=request.method,
        path=request.url.path,
        query_params=params_from_pairs(request.query_params.multi_items()),
        headers=dict(request.headers),
    )


async def read_response(response: Response) -> CacheResponse:
    """Drain a downstream (streaming) response into a buffered CacheResponse."""
    chunks: List[bytes] = []
    body_iterator = getattr(response, "body_iterator", None)
    if body_iterator is not None:
        async for chunk in body_iterator:
            chunks.append(chunk if isinstance(chunk, bytes) else chunk.encode("utf-8"))
    else:
        chunks.append(response.body)
    headers = [(key.decode("latin-1"), value.decode("latin-1")) for key, value in response.raw_headers]
    return CacheResponse(status=response.status_code, headers=headers, body=b"".join(chunks))


def to_starlette_response(cache_response: CacheResponse, head: bool = False) -> Response:
    """Build a Starlette response keeping header order and duplicates."""
    body = b"" if head or cache_response.status in _BODYLESS_STATUSES else cache_response.body
    response = Response(content=body, status_code=cache_response.status)

    raw_headers: List[Tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in cache_response.headers
    ]
    needs_length = (
        cache_response.status not in _BODYLESS_STATUSES
        and cache_response.status >= 200
        and not cache_response.has_header("content-length")
    )
    if needs_length:
        raw_headers.append((b"content-length", str(len(cache_response.body)).encode("latin-1")))
    response.raw_headers = raw_headers
    return response


class HttpCacheMiddleware(BaseHTTPMiddleware):
    """
    Middleware that serves GET/HEAD responses from the shared cache.

    Requests the cache must not see (other methods, explicit bypass,
    no-store, credentials) are passed through without buffering.
    """

    def __init__(
        self,
        app,
        *,
        protocol: HttpCacheProtocol,
        exclude_paths: Optional[List[str]] = None,
    ):
        super().__init__(app)
        self.protocol = protocol
        self.exclude_paths = exclude_paths or ["/health", "/metrics", "/docs"]

    def is_excluded(self, path: str) -> bool:
        """Match excluded prefixes on whole path segments only."""
        for excluded in self.exclude_paths:
            excluded = excluded.rstrip("/")
            if path == excluded or path.startswith(excluded + "/"):
                return True
        return False

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request through the cache state machine."""
        if self.is_excluded(request.url.path):
            return await call_next(request)

        cache_request = to_cache_request(request)
        if self.protocol.bypass_reason(cache_request) is not None:
            return await call_next(request)

        async def downstream(_: CacheRequest) -> CacheResponse:
            return await read_response(await call_next(request))

        outcome = await self.protocol.process(cache_request, downstream)
        logger.debug(
            "HTTP cache %s for %s %s",
            outcome.state.value,
            request.method,
            request.url.path,
        )
        return to_starlette_response(outcome.response, head=cache_request.method == "HEAD")


def install_http_cache(app, protocol: HttpCacheProtocol, exclude_paths: Optional[List[str]] = None) -> None:
    """Register the cache middleware on a FastAPI or Starlette application."""
    app.add_middleware(HttpCacheMiddleware, protocol=protocol, exclude_paths=exclude_paths)
