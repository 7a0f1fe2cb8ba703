"""Database entities."""

from .cache_plan import (
    CacheEntry,
    CachePlan,
    StaticPlan,
    ComputedPlan,
    PlanEntries,
    PlanFunction,
    as_plan,
    normalize_entries,
)

__all__ = [
    "CacheEntry",
    "CachePlan",
    "StaticPlan",
    "ComputedPlan",
    "PlanEntries",
    "PlanFunction",
    "as_plan",
    "normalize_entries",
]
