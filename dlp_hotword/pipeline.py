"""Inspect flow: text + rules → candidate finder → hotword engine → findings.

Stage order
-----------
1. CandidateFinder      raw matches for the requested info types
2. HotwordRuleEngine    proximity-based likelihood adjustment
3. min_likelihood gate  drop findings whose final likelihood is too low
4. Reporter             optional text rendering (inspect_string_custom_hotword)

Every call is independent: no state survives between calls, so callers
may run inspections for different texts in parallel.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from dlp_hotword.core.errors import ConfigurationError
from dlp_hotword.core.settings import get_settings
from dlp_hotword.pii.finder import CandidateFinder
from dlp_hotword.pii.hotword_engine import CombinationPolicy, HotwordRuleEngine
from dlp_hotword.pii.likelihood import Likelihood, parse_likelihood
from dlp_hotword.pii.models import AdjustedFinding, HotwordRule
from dlp_hotword.report.reporter import render_text
from dlp_hotword.rules.loader import custom_hotword_rule

logger = logging.getLogger(__name__)


def inspect_text(
    text: str,
    rules: Sequence[HotwordRule] | HotwordRuleEngine,
    finder: CandidateFinder,
    info_types: Iterable[str] | None = None,
    min_likelihood: Likelihood | str | None = None,
    policy: CombinationPolicy = CombinationPolicy.SEQUENTIAL,
) -> list[AdjustedFinding]:
    """Find candidates in *text*, apply hotword rules and filter by likelihood.

    *rules* may be a prepared HotwordRuleEngine to avoid recompiling
    patterns on every call; *policy* is ignored in that case.
    *info_types* and *min_likelihood* default to the configured
    ``DEFAULT_INFO_TYPES`` and ``MIN_LIKELIHOOD``.

    Raises
    ------
    ConfigurationError
        A rule or the minimum likelihood is malformed.
    InvalidMatchError
        The finder returned a span that does not fit *text*.
    """
    settings = get_settings()
    requested = list(info_types) if info_types is not None else list(settings.default_info_types)
    try:
        floor = parse_likelihood(
            min_likelihood if min_likelihood is not None else settings.min_likelihood
        )
    except ValueError as exc:
        raise ConfigurationError(f"min_likelihood: {exc}") from exc

    engine = rules if isinstance(rules, HotwordRuleEngine) else HotwordRuleEngine(rules, policy=policy)
    matches = finder.find(text, requested)
    findings = engine.adjust(text, matches)
    kept = [f for f in findings if f.final_likelihood >= floor]

    logger.info(
        "Inspect: info_types=%s candidates=%d adjusted=%d reported=%d",
        requested,
        len(matches),
        sum(1 for f in findings if f.adjusted),
        len(kept),
    )
    return kept


def inspect_string_custom_hotword(
    text: str,
    custom_hotword: str,
    finder: CandidateFinder,
    info_types: Iterable[str] = ("PERSON_NAME",),
) -> str:
    """Raise matches preceded by *custom_hotword* to VERY_LIKELY and render a report."""
    rule = custom_hotword_rule(custom_hotword, info_types=info_types)
    findings = inspect_text(text, [rule], finder, info_types=info_types)
    return render_text(text, findings)
