"""HTTP cache services."""

from .http_cache_protocol import (
    HttpCacheProtocol,
    Handler,
    compute_etag,
    if_none_match_satisfied,
    sanitize_headers,
    cache_control_directives,
)

__all__ = [
    "HttpCacheProtocol",
    "Handler",
    "compute_etag",
    "if_none_match_satisfied",
    "sanitize_headers",
    "cache_control_directives",
]
