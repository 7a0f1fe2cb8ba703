"""Cache adapters."""

from .redis_store import RedisCacheStore

__all__ = ["RedisCacheStore"]
