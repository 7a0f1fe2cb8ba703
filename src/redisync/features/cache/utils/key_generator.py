"""
Deterministic cache-key derivation for HTTP requests.

The canonical form of a request is ``prefix:METHOD:path?query`` where the query
is rebuilt from the parameters after dropping ignored names and sorting every
mapping level, then encoded with RFC 3986 percent-encoding (only unreserved
characters are left as is). The canonical string is hashed with MD5; the hash
only has to spread keys, it is not a security boundary, so the 128-bit digest
is kept for compatibility with keys written by other RediSync clients.
"""
import hashlib
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import quote

# RFC 3986 unreserved characters besides ALPHA / DIGIT
_UNRESERVED = "-._~"


def _encode(value: str) -> str:
    return quote(value, safe=_UNRESERVED)


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def sort_params(value: Any) -> Any:
    """Recursively sort mapping keys; sequence order is meaningful and kept."""
    if isinstance(value, Mapping):
        return {str(k): sort_params(value[k]) for k in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [sort_params(item) for item in value]
    return value


def _flatten(name: str, value: Any) -> Iterator[Tuple[str, str]]:
    if value is None:
        return
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            yield from _flatten(f"{name}[{sub_key}]", sub_value)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            yield from _flatten(f"{name}[{index}]", item)
    else:
        yield name, _scalar(value)


def build_query(params: Optional[Mapping[str, Any]]) -> str:
    """Build the canonical query string for already-filtered parameters."""
    if not params:
        return ""
    ordered = sort_params(params)
    pairs: List[str] = []
    for name, value in ordered.items():
        for key, scalar in _flatten(name, value):
            pairs.append(f"{_encode(key)}={_encode(scalar)}")
    return "&".join(pairs)


def canonical_request(
    prefix: str,
    method: str,
    path: str,
    query_params: Optional[Mapping[str, Any]] = None,
    ignored_params: Iterable[str] = (),
) -> str:
    """Return the canonical string a cache key is hashed from."""
    ignored = set(ignored_params)
    params = {k: v for k, v in (query_params or {}).items() if k not in ignored}
    query = build_query(params)
    base = f"{prefix.rstrip(':')}:{method.upper()}:{path}"
    return f"{base}?{query}" if query else base


def derive_key(
    prefix: str,
    method: str,
    path: str,
    query_params: Optional[Mapping[str, Any]] = None,
    ignored_params: Iterable[str] = (),
) -> str:
    """Derive the cache key of a request. Pure and deterministic."""
    canonical = canonical_request(prefix, method, path, query_params, ignored_params)
    return hashlib.md5(canonical.encode("utf-8"), usedforsecurity=False).hexdigest()


def params_from_pairs(pairs: Iterable[Tuple[str, str]]) -> dict:
    """Fold ordered query pairs into a mapping; repeated names become lists."""
    params: dict = {}
    for name, value in pairs:
        if name in params:
            existing = params[name]
            if isinstance(existing, list):
                existing.append(value)
            else:
                params[name] = [existing, value]
        else:
            params[name] = value
    return params


class KeyGenerator:
    """Cache-key generator bound to a prefix and a set of ignored parameters."""

    def __init__(self, prefix: str = "http:", ignored_params: Sequence[str] = ()):
        self.prefix = prefix.rstrip(":")
        self.ignored_params = tuple(ignored_params)

    def from_parts(self, method: str, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Derive a key from a method, a path and decoded query parameters."""
        return derive_key(self.prefix, method, path, params, self.ignored_params)

    def canonical(self, method: str, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Return the unhashed canonical form, useful when debugging key clashes."""
        return canonical_request(self.prefix, method, path, params, self.ignored_params)
