"""
Middleware for exposing the HTTP response cache to ASGI applications.
"""

from .http_cache import (
    HttpCacheMiddleware,
    install_http_cache,
    to_cache_request,
    read_response,
    to_starlette_response,
)

__all__ = [
    "HttpCacheMiddleware",
    "install_http_cache",
    "to_cache_request",
    "read_response",
    "to_starlette_response",
]
