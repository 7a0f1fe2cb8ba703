"""Key introspection result."""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass(frozen=True)
class KeyInfo:
    """Snapshot of a key as reported by the backend.

    ``ttl`` follows the Redis convention: -1 means no expiration and -2 means
    the key does not exist.
    """

    key: str
    ttl: int
    type: str
    size: int
    exists: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
