"""Cache plans returned by write handlers.

A plan describes what the cache must reflect once a database mutation has
committed. StaticPlan carries the entries up front; ComputedPlan derives them
from the affected row count, the statement parameters and the transaction
connection (to read back generated identifiers, for example).
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, List, Mapping, Optional, Union


@dataclass(frozen=True)
class CacheEntry:
    """One cache mutation: ``value=None`` deletes, ``ttl=None`` uses the default."""

    key: str
    value: Any = None
    ttl: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CacheEntry":
        if "key" not in data:
            raise ValueError(f"Cache plan entry has no key: {data!r}")
        return cls(key=str(data["key"]), value=data.get("value"), ttl=data.get("ttl"))


PlanEntries = Union[Iterable[Union[CacheEntry, Mapping[str, Any]]], Mapping[str, Any], None]

PlanFunction = Callable[[int, Any, Any], Union[PlanEntries, Awaitable[PlanEntries]]]


def normalize_entries(entries: PlanEntries, default_ttl: Optional[int] = None) -> List[CacheEntry]:
    """Turn any accepted plan shape into a list of CacheEntry.

    A mapping is key -> value with ``default_ttl`` for every key; a sequence
    holds CacheEntry objects or ``{key, value, ttl?}`` dicts.
    """
    if not entries:
        return []
    if isinstance(entries, Mapping):
        return [CacheEntry(key=str(key), value=value, ttl=default_ttl) for key, value in entries.items()]

    normalized = []
    for entry in entries:
        if not isinstance(entry, CacheEntry):
            entry = CacheEntry.from_dict(entry)
        if entry.ttl is None and default_ttl is not None:
            entry = CacheEntry(key=entry.key, value=entry.value, ttl=default_ttl)
        normalized.append(entry)
    return normalized


@dataclass(frozen=True)
class StaticPlan:
    """Entries known before the statement runs."""

    entries: PlanEntries = field(default_factory=list)

    async def resolve(self, affected: int, params: Any, connection: Any, default_ttl: Optional[int] = None) -> List[CacheEntry]:
        return normalize_entries(self.entries, default_ttl)


@dataclass(frozen=True)
class ComputedPlan:
    """Entries computed from ``(affected, params, connection)``."""

    function: PlanFunction

    async def resolve(self, affected: int, params: Any, connection: Any, default_ttl: Optional[int] = None) -> List[CacheEntry]:
        entries = self.function(affected, params, connection)
        if inspect.isawaitable(entries):
            entries = await entries
        return normalize_entries(entries, default_ttl)


CachePlan = Union[StaticPlan, ComputedPlan]


def as_plan(plan: Union[CachePlan, PlanFunction, PlanEntries]) -> CachePlan:
    """Wrap a raw callable, list or mapping in the matching plan variant."""
    if isinstance(plan, (StaticPlan, ComputedPlan)):
        return plan
    if callable(plan):
        return ComputedPlan(plan)
    return StaticPlan(plan)
