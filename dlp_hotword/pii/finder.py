"""Candidate finder contract and the mapping between score and likelihood.

A CandidateFinder is whatever detects raw sensitive-data matches in a text
(an NER model, a regex library, a remote inspection service).  The hotword
engine never looks inside it; it only consumes the Match list it returns.

Score → likelihood thresholds
-----------------------------
score < 0.20  VERY_UNLIKELY
score < 0.40  UNLIKELY
score < 0.60  POSSIBLE
score < 0.85  LIKELY
otherwise     VERY_LIKELY
"""
from __future__ import annotations

from typing import Iterable, Protocol

from dlp_hotword.pii.likelihood import Likelihood
from dlp_hotword.pii.models import Match

_SCORE_THRESHOLDS: list[tuple[float, Likelihood]] = [
    (0.20, Likelihood.VERY_UNLIKELY),
    (0.40, Likelihood.UNLIKELY),
    (0.60, Likelihood.POSSIBLE),
    (0.85, Likelihood.LIKELY),
]


class CandidateFinder(Protocol):
    def find(self, text: str, info_types: Iterable[str]) -> list[Match]:
        """Return raw matches of the requested *info_types* in *text*."""
        ...


def score_to_likelihood(score: float) -> Likelihood:
    """Bucket a 0.0–1.0 detector confidence into a likelihood level."""
    for upper, level in _SCORE_THRESHOLDS:
        if score < upper:
            return level
    return Likelihood.VERY_LIKELY
