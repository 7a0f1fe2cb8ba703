"""Database utilities."""

from .sql import Params, compile_params, affected_rows, is_mutation

__all__ = ["Params", "compile_params", "affected_rows", "is_mutation"]
