"""Stored representation of a cached HTTP response."""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ....core.exceptions import CacheSerializationError

ENVELOPE_VERSION = 1

HeaderMap = Dict[str, List[str]]


def map_to_headers(headers: Mapping[str, List[str]]) -> List[Tuple[str, str]]:
    """Expand a header map back into ordered pairs."""
    return [(name, value) for name, values in headers.items() for value in values]


@dataclass(frozen=True)
class CachedResponseEnvelope:
    """Immutable snapshot of a response, replaced wholesale on re-store.

    The JSON schema is fixed: the body travels base64 encoded so binary
    payloads survive the round trip, and ``v`` versions the layout.
    """

    status: int
    headers: HeaderMap = field(default_factory=dict)
    body: bytes = b""
    stored_at: float = 0.0
    etag: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "v": ENVELOPE_VERSION,
            "status": self.status,
            "headers": {name: list(values) for name, values in self.headers.items()},
            "body": base64.b64encode(self.body).decode("ascii"),
            "stored_at": self.stored_at,
            "etag": self.etag,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "CachedResponseEnvelope":
        """Rebuild an envelope, raising CacheSerializationError on schema mismatch."""
        if not isinstance(data, dict) or data.get("v") != ENVELOPE_VERSION:
            raise CacheSerializationError("Cached value is not a response envelope")
        try:
            status = data["status"]
            raw_headers = data["headers"]
            if not isinstance(status, int) or not isinstance(raw_headers, dict):
                raise TypeError("status must be int and headers a mapping")
            for values in raw_headers.values():
                if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                    raise TypeError("header values must be lists of strings")
            headers = {str(name).lower(): list(values) for name, values in raw_headers.items()}
            body = base64.b64decode(data["body"], validate=True)
            etag = data.get("etag")
            return cls(
                status=status,
                headers=headers,
                body=body,
                stored_at=float(data["stored_at"]),
                etag=str(etag) if etag else None,
            )
        except (KeyError, TypeError, ValueError, binascii.Error) as e:
            raise CacheSerializationError(f"Malformed response envelope: {e}") from e

    def header(self, name: str) -> Optional[str]:
        """Return the first value of a header, if present."""
        values = self.headers.get(name.lower())
        return values[0] if values else None

    def header_pairs(self) -> List[Tuple[str, str]]:
        return map_to_headers(self.headers)
