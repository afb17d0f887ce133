from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatchcase


class SourceExclusions:
    """Glob-based opt-out: matching sources are always served locally."""

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns = tuple(p.lstrip("/") for p in patterns if p)

    def is_excluded(self, source: str) -> bool:
        if not self.patterns:
            return False
        candidate = source.split("?", 1)[0].lstrip("/")
        return any(fnmatchcase(candidate, pattern) for pattern in self.patterns)

    __call__ = is_excluded
