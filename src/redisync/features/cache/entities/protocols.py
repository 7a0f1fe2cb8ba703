"""Cache protocols for redisync.

KeyValueBackend is the slice of the Redis command set the cache store relies
on; redis.asyncio.Redis satisfies it as is. CacheStore is what the HTTP cache
and the write-through coordinator consume, so either can run against any
store implementation.
"""

from abc import abstractmethod
from typing import (
    Any,
    Awaitable,
    Callable,
    List,
    Optional,
    Protocol,
    Tuple,
    TypeVar,
    Union,
    runtime_checkable,
)

from .key_info import KeyInfo

T = TypeVar('T')

Producer = Callable[[], Union[T, Awaitable[T]]]


@runtime_checkable
class KeyValueBackend(Protocol):
    """Commands consumed from the external key-value backend."""

    async def get(self, name: str) -> Any: ...

    async def set(self, name: str, value: Any, ex: Optional[int] = None) -> Any: ...

    async def delete(self, *names: str) -> int: ...

    async def scan(
        self, cursor: int = 0, match: Optional[str] = None, count: Optional[int] = None
    ) -> Tuple[int, List[Any]]: ...

    async def ttl(self, name: str) -> int: ...

    async def type(self, name: str) -> Any: ...

    async def strlen(self, name: str) -> int: ...

    async def exists(self, *names: str) -> int: ...

    async def ping(self) -> Any: ...


@runtime_checkable
class CacheStore(Protocol):
    """Prefixed, JSON-serializing cache over a key-value backend."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a value; None deletes and a falsy ttl means no expiration."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a key."""
        ...

    @abstractmethod
    async def clear_by_pattern(self, pattern: str = "*") -> int:
        """Delete every key matching a glob pattern, returning the count."""
        ...

    @abstractmethod
    async def list_keys(self, pattern: str = "*", limit: int = 1000) -> List[str]:
        """List unprefixed key names matching a glob pattern."""
        ...

    @abstractmethod
    async def key_info(self, key: str) -> KeyInfo:
        """Describe a key without modifying it."""
        ...

    @abstractmethod
    async def get_or_compute(self, key: str, ttl: Optional[int], producer: Producer) -> Any:
        """Return the cached value or compute, store and return it."""
        ...
