"""Path-pattern keyed TTL resolution."""

import re
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Iterable, List, Optional, Pattern, Tuple

from ....core.exceptions import ConfigurationError


def _is_delimited_regex(pattern: str) -> bool:
    """``#^/slow/.*$#`` style: same non-alphanumeric character at both ends."""
    return len(pattern) > 2 and pattern[0] == pattern[-1] and not pattern[0].isalnum()


@dataclass(frozen=True)
class TtlRule:
    """One (pattern, ttl) entry; the pattern is a glob or a delimited regex."""

    pattern: str
    ttl: int
    _regex: Optional[Pattern[str]] = field(default=None, repr=False, compare=False)

    @classmethod
    def parse(cls, pattern: str, ttl: int) -> "TtlRule":
        regex = None
        if _is_delimited_regex(pattern):
            try:
                regex = re.compile(pattern[1:-1])
            except re.error as e:
                raise ConfigurationError(
                    f"Invalid TTL pattern {pattern!r}: {e}", config_key="CACHE_TTL_MAP"
                ) from e
        return cls(pattern=pattern, ttl=int(ttl), _regex=regex)

    def matches(self, path: str) -> bool:
        if self._regex is not None:
            return self._regex.search(path) is not None
        return fnmatchcase(path, self.pattern)


class TtlPolicy:
    """Ordered TTL rules plus a default; the first matching rule wins."""

    def __init__(self, default_ttl: int, rules: Iterable[Tuple[str, int]] = ()):
        self.default_ttl = default_ttl
        self.rules: List[TtlRule] = [TtlRule.parse(pattern, ttl) for pattern, ttl in rules]

    def resolve(self, path: str) -> int:
        """Return the TTL for a request path."""
        for rule in self.rules:
            if rule.matches(path):
                return rule.ttl
        return self.default_ttl
