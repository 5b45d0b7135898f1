"""Pattern-matching capability used by the hotword engine.

The engine only needs two things from a text-matching library: turn a rule's
pattern into something searchable (failing fast on bad input) and find the
leftmost occurrence inside a window.

Matching is case-sensitive.  Zero-length occurrences (e.g. ``a*`` against
"xyz") are ignored: a hotword must consume at least one character.
"""
from __future__ import annotations

import re
from typing import Any, Protocol

from dlp_hotword.core.errors import ConfigurationError
from dlp_hotword.pii.models import Span


class PatternMatcher(Protocol):
    def compile(self, pattern: str) -> Any:
        """Return a compiled form of *pattern* or raise ConfigurationError."""
        ...

    def find_first(self, window: str, compiled: Any) -> Span | None:
        """Return the span of the leftmost non-empty occurrence in *window*."""
        ...


class RegexPatternMatcher:
    """Hotword patterns as Python regular expressions (``re`` module)."""

    def compile(self, pattern: str) -> re.Pattern[str]:
        if not isinstance(pattern, str) or not pattern:
            raise ConfigurationError("pattern must be a non-empty string")
        try:
            return re.compile(pattern)
        except re.error as exc:
            raise ConfigurationError(f"invalid hotword pattern {pattern!r}: {exc}") from exc

    def find_first(self, window: str, compiled: re.Pattern[str]) -> Span | None:
        for found in compiled.finditer(window):
            if found.end() > found.start():
                return Span(found.start(), found.end())
        return None


class LiteralPatternMatcher:
    """Hotword patterns as verbatim substrings; no regex metacharacters."""

    def compile(self, pattern: str) -> str:
        if not isinstance(pattern, str) or not pattern:
            raise ConfigurationError("pattern must be a non-empty string")
        return pattern

    def find_first(self, window: str, compiled: str) -> Span | None:
        index = window.find(compiled)
        if index < 0:
            return None
        return Span(index, index + len(compiled))
