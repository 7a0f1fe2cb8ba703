"""SQL helpers for the asyncpg-backed database manager."""

import re
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

Params = Optional[Union[Sequence[Any], Mapping[str, Any]]]

# Quoted literals and identifiers are matched first so placeholders inside
# them are left alone; ``::type`` casts are skipped by the lookbehind.
_NAMED_PARAM = re.compile(
    r"""'(?:[^']|'')*'|"(?:[^"]|"")*"|(?<![:\w]):([A-Za-z_][A-Za-z0-9_]*)"""
)

_LEADING_NOISE = re.compile(r"^(?:\s+|--[^\n]*\n|/\*.*?\*/)*", re.DOTALL)

MUTATION_KEYWORDS = ("INSERT", "UPDATE", "DELETE")


def compile_params(sql: str, params: Params = None) -> Tuple[str, List[Any]]:
    """Translate a statement and its parameters to asyncpg's ``$n`` form.

    Sequences are passed through positionally. Mappings bind ``:name``
    placeholders; a name used twice reuses the same positional slot.

    Raises:
        KeyError: a named placeholder has no value in the mapping.
    """
    if params is None:
        return sql, []
    if not isinstance(params, Mapping):
        return sql, list(params)

    positions: dict = {}
    args: List[Any] = []

    def replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name is None:
            return match.group(0)
        if name not in positions:
            if name not in params:
                raise KeyError(f"Missing value for SQL parameter :{name}")
            args.append(params[name])
            positions[name] = len(args)
        return f"${positions[name]}"

    return _NAMED_PARAM.sub(replace, sql), args


def affected_rows(status: Optional[str]) -> int:
    """Parse the row count out of a command tag such as ``INSERT 0 3``."""
    if not status:
        return 0
    last = status.strip().rsplit(" ", 1)[-1]
    return int(last) if last.isdigit() else 0


def is_mutation(sql: str) -> bool:
    """True for statements that start with INSERT, UPDATE or DELETE."""
    statement = _LEADING_NOISE.sub("", sql, count=1).lstrip("( \t\r\n").upper()
    return statement.startswith(MUTATION_KEYWORDS)
