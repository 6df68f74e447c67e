"""Scope exclusion by configuration name."""

from __future__ import annotations

import re
from collections.abc import Iterable


class ScopeExcludes:
    """Regular expressions that exclude scopes when they match a whole name.

    Repeated patterns collapse into one, so excluding a scope twice is the
    same as excluding it once.
    """

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self.patterns: list[str] = list(dict.fromkeys(patterns))
        self._compiled = [re.compile(p) for p in self.patterns]

    def is_scope_excluded(self, name: str) -> bool:
        return any(r.fullmatch(name) for r in self._compiled)

    def __call__(self, name: str) -> bool:
        return self.is_scope_excluded(name)

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def __repr__(self) -> str:
        return f"ScopeExcludes({self.patterns!r})"
