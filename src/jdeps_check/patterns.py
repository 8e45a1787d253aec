from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

SEPARATOR = "/"


@lru_cache(maxsize=256)
def _segment_regex(segment: str) -> re.Pattern:
    parts = []
    for c in segment:
        if c == "*":
            parts.append(".*")
        elif c == "?":
            parts.append(".")
        else:
            parts.append(re.escape(c))
    return re.compile("".join(parts), re.DOTALL)


def match_segment(pattern: str, name: str) -> bool:
    """`*` matches any run of characters, `?` exactly one."""
    return _segment_regex(pattern).fullmatch(name) is not None


def match_pattern_start(pattern: str, name: str) -> bool:
    """
    ANT-style match with "pattern start" semantics: True when `name` matches
    `pattern` or could be the leading part of a path that does.

    Patterns and names are split on '/'; '**' spans any number of segments.
    """
    pat = [s for s in pattern.split(SEPARATOR) if s]
    parts = [s for s in name.split(SEPARATOR) if s]

    i = 0
    while i < len(pat) and i < len(parts):
        if pat[i] == "**":
            return True
        if not match_segment(pat[i], parts[i]):
            return False
        i += 1

    if i == len(parts):
        # name exhausted: it is the start of something the pattern can match
        return True
    # name has segments left over that the pattern cannot reach
    return False


class MatchPatterns:
    """A set of include or exclude patterns over `groupId:artifactId` keys."""

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns = tuple(p.strip() for p in patterns if p and p.strip())

    def matches(self, name: str) -> bool:
        return any(match_pattern_start(p, name) for p in self.patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def __repr__(self) -> str:
        return f"MatchPatterns({list(self.patterns)!r})"
