"""Framework-agnostic request and response values seen by the HTTP cache."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

HeaderPairs = List[Tuple[str, str]]


@dataclass(frozen=True)
class CacheRequest:
    """The parts of an incoming request that drive caching decisions.

    ``headers`` is keyed by lower-cased header name.
    """

    method: str
    path: str
    query_params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        query_params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "CacheRequest":
        return cls(
            method=method.upper(),
            path=path,
            query_params=dict(query_params or {}),
            headers={name.lower(): value for name, value in (headers or {}).items()},
        )

    def header(self, name: str, default: str = "") -> str:
        return self.headers.get(name.lower(), default)


@dataclass(frozen=True)
class CacheResponse:
    """A fully buffered response; headers keep their order and duplicates."""

    status: int
    headers: HeaderPairs = field(default_factory=list)
    body: bytes = b""

    def header(self, name: str, default: str = "") -> str:
        """Return all values of a header joined with ', '."""
        lowered = name.lower()
        values = [value for key, value in self.headers if key.lower() == lowered]
        return ", ".join(values) if values else default

    def has_header(self, name: str) -> bool:
        lowered = name.lower()
        return any(key.lower() == lowered for key, _ in self.headers)

    def with_header(self, name: str, value: str) -> "CacheResponse":
        """Return a copy with ``name`` replaced by a single value."""
        lowered = name.lower()
        headers = [(key, val) for key, val in self.headers if key.lower() != lowered]
        headers.append((name, value))
        return replace(self, headers=headers)

    def header_map(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for key, value in self.headers:
            grouped.setdefault(key.lower(), []).append(value)
        return grouped
