"""Value types shared by the candidate finder, the hotword engine and the reporter.

All types are frozen dataclasses: a Match is never modified after the
finder produces it, a HotwordRule never after the rule set is loaded, and
an AdjustedFinding never after the engine emits it.

Field contract
--------------
Span            : half-open [start, end) character offsets into the inspected text
Match           : info_type label + span + likelihood assigned by the finder
HotwordRule     : applies_to (empty = every info type), pattern, proximity
                  window and the adjustment applied when the pattern fires
AdjustedFinding : the engine's verdict for one Match
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Union

from dlp_hotword.core.errors import ConfigurationError, InvalidMatchError
from dlp_hotword.pii.likelihood import Likelihood, parse_likelihood, step


@dataclass(frozen=True)
class Span:
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise InvalidMatchError(f"span start must be >= 0; got {self.start}")
        if self.end <= self.start:
            raise InvalidMatchError(
                f"span end must be greater than start; got [{self.start}, {self.end})"
            )

    def __len__(self) -> int:
        return self.end - self.start

    def fits(self, text: str) -> bool:
        """Return True if the span lies inside *text*."""
        return self.end <= len(text)


@dataclass(frozen=True)
class Match:
    """A raw candidate produced by a CandidateFinder."""

    info_type: str
    span: Span
    likelihood: Likelihood

    def __post_init__(self) -> None:
        try:
            level = parse_likelihood(self.likelihood)
        except ValueError as exc:
            raise InvalidMatchError(str(exc)) from exc
        object.__setattr__(self, "likelihood", level)


# ---------------------------------------------------------------------------
# Likelihood adjustments (tagged variant)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FixedLikelihood:
    """Set the likelihood to *level*, whatever it was before."""

    level: Likelihood

    def apply(self, current: Likelihood) -> Likelihood:
        return self.level


@dataclass(frozen=True)
class RelativeLikelihood:
    """Move the likelihood *steps* positions up (positive) or down (negative)."""

    steps: int

    def apply(self, current: Likelihood) -> Likelihood:
        return step(current, self.steps)


Adjustment = Union[FixedLikelihood, RelativeLikelihood]


@dataclass(frozen=True)
class HotwordRule:
    """A proximity rule: when *pattern* occurs near a match, adjust its likelihood.

    window_before / window_after are character counts measured from the
    match's start and end respectively.
    """

    pattern: str
    adjustment: Adjustment
    applies_to: frozenset[str] = field(default_factory=frozenset)
    window_before: int = 0
    window_after: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.adjustment, (FixedLikelihood, RelativeLikelihood)):
            raise ConfigurationError(
                f"adjustment must be FixedLikelihood or RelativeLikelihood; "
                f"got {type(self.adjustment).__name__}"
            )
        for name in ("window_before", "window_after"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer; got {value!r}")
            if value < 0:
                raise ConfigurationError(f"{name} must be >= 0; got {value}")

        labels = self.applies_to
        if isinstance(labels, str):
            labels = {labels}
        elif not isinstance(labels, Iterable):
            raise ConfigurationError(
                f"applies_to must be a label or a collection of labels; got {labels!r}"
            )
        labels = list(labels)
        if not all(isinstance(label, str) and label for label in labels):
            raise ConfigurationError("applies_to labels must be non-empty strings")
        object.__setattr__(self, "applies_to", frozenset(labels))

    def applies(self, info_type: str) -> bool:
        """Return True if this rule covers *info_type* (empty applies_to covers all)."""
        return not self.applies_to or info_type in self.applies_to


@dataclass(frozen=True)
class AdjustedFinding:
    info_type: str
    span: Span
    original_likelihood: Likelihood
    final_likelihood: Likelihood
    matched_hotword: str | None = None

    @property
    def adjusted(self) -> bool:
        return self.matched_hotword is not None

    def quote(self, text: str) -> str:
        """Return the slice of *text* this finding covers."""
        return text[self.span.start:self.span.end]
