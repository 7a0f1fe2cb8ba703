"""Cache utilities."""

from .key_generator import KeyGenerator, derive_key, build_query, params_from_pairs

__all__ = ["KeyGenerator", "derive_key", "build_query", "params_from_pairs"]
