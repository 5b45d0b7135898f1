"""Hotword rule engine: re-score candidate matches by nearby hotwords.

For every Match the engine looks at each rule covering the match's info
type, searches the rule's proximity window for the rule's pattern and, when
it is found, applies the rule's likelihood adjustment.

Proximity window
----------------
    [max(0, start - window_before), min(len(text), end + window_after))

minus the match's own span: the text before the match and the text after it
are searched as two separate segments (before first), so a hotword can never
fire on the match itself nor straddle its boundary.

Combination of several firing rules
-----------------------------------
SEQUENTIAL (default)  rules are applied in input order to a running
                      likelihood; a fixed level overrides it, a relative
                      adjustment moves it.  matched_hotword comes from the
                      first rule that fired.
STRONGEST             each firing rule is applied to the original
                      likelihood on its own and the highest result wins;
                      earlier rules win ties.

Rules are compiled once at construction, so a bad pattern surfaces as
ConfigurationError before any match is looked at.  The engine keeps no
per-call state and may be shared between threads.

Safety rule: matched text and window contents are never logged: only the
info type, likelihoods and rule indices.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Sequence

from dlp_hotword.core.errors import ConfigurationError, InvalidMatchError
from dlp_hotword.pii.likelihood import clamp, strongest
from dlp_hotword.pii.models import AdjustedFinding, HotwordRule, Match, Span
from dlp_hotword.pii.pattern import PatternMatcher, RegexPatternMatcher

logger = logging.getLogger(__name__)


class CombinationPolicy(str, Enum):
    SEQUENTIAL = "sequential"
    STRONGEST = "strongest"


class HotwordRuleEngine:
    """Apply a fixed list of hotword rules to candidate matches."""

    def __init__(
        self,
        rules: Iterable[HotwordRule],
        matcher: PatternMatcher | None = None,
        policy: CombinationPolicy = CombinationPolicy.SEQUENTIAL,
    ) -> None:
        """Register *rules* and compile their patterns.

        Raises
        ------
        ConfigurationError
            If a rule is not a HotwordRule or its pattern does not compile.
            ``rule_index`` names the offending position in *rules*.
        """
        self._matcher: PatternMatcher = matcher or RegexPatternMatcher()
        self._policy = CombinationPolicy(policy)
        self._rules: tuple[HotwordRule, ...] = tuple(rules)

        compiled: list[Any] = []
        for index, rule in enumerate(self._rules):
            if not isinstance(rule, HotwordRule):
                raise ConfigurationError(
                    f"expected HotwordRule, got {type(rule).__name__}", rule_index=index
                )
            try:
                compiled.append(self._matcher.compile(rule.pattern))
            except ConfigurationError as exc:
                raise ConfigurationError(str(exc), rule_index=index) from exc
        self._compiled: tuple[Any, ...] = tuple(compiled)

        logger.debug(
            "HotwordRuleEngine: registered %d rule(s) policy=%s",
            len(self._rules),
            self._policy.value,
        )

    @property
    def rules(self) -> tuple[HotwordRule, ...]:
        return self._rules

    @property
    def policy(self) -> CombinationPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def adjust(self, text: str, matches: Sequence[Match]) -> list[AdjustedFinding]:
        """Return one AdjustedFinding per match, in input order.

        Raises
        ------
        InvalidMatchError
            If any match's span does not lie inside *text*.  No findings are
            returned for the call.
        """
        for index, match in enumerate(matches):
            if not match.span.fits(text):
                raise InvalidMatchError(
                    f"span [{match.span.start}, {match.span.end}) exceeds text "
                    f"length {len(text)}",
                    match_index=index,
                )

        return [self._adjust_match(text, match) for match in matches]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _adjust_match(self, text: str, match: Match) -> AdjustedFinding:
        fired: list[tuple[int, str]] = []
        for index, rule in enumerate(self._rules):
            if not rule.applies(match.info_type):
                continue
            hotword = self._find_hotword(text, match.span, rule, self._compiled[index])
            if hotword is not None:
                fired.append((index, hotword))

        final = match.likelihood
        matched_hotword: str | None = None
        if fired and self._policy is CombinationPolicy.SEQUENTIAL:
            for index, _ in fired:
                final = self._rules[index].adjustment.apply(final)
            matched_hotword = fired[0][1]
        elif fired:
            outcomes = [
                (self._rules[index].adjustment.apply(match.likelihood), hotword)
                for index, hotword in fired
            ]
            final = strongest(level for level, _ in outcomes)
            matched_hotword = next(hotword for level, hotword in outcomes if level == final)

        final = clamp(final)

        logger.debug(
            "Hotword: info_type=%s original=%s final=%s rules_fired=%s",
            match.info_type,
            match.likelihood.name,
            final.name,
            [index for index, _ in fired],
        )

        return AdjustedFinding(
            info_type=match.info_type,
            span=match.span,
            original_likelihood=match.likelihood,
            final_likelihood=final,
            matched_hotword=matched_hotword,
        )

    def _find_hotword(
        self, text: str, span: Span, rule: HotwordRule, compiled: Any
    ) -> str | None:
        before_start = max(0, span.start - rule.window_before)
        after_end = min(len(text), span.end + rule.window_after)

        for seg_start, seg_end in ((before_start, span.start), (span.end, after_end)):
            if seg_end <= seg_start:
                continue
            segment = text[seg_start:seg_end]
            found = self._matcher.find_first(segment, compiled)
            if found is not None:
                return segment[found.start:found.end]
        return None


def adjust(
    text: str,
    matches: Sequence[Match],
    rules: Iterable[HotwordRule],
    matcher: PatternMatcher | None = None,
    policy: CombinationPolicy = CombinationPolicy.SEQUENTIAL,
) -> list[AdjustedFinding]:
    """One-shot convenience wrapper: build an engine for *rules* and run it."""
    return HotwordRuleEngine(rules, matcher=matcher, policy=policy).adjust(text, matches)
