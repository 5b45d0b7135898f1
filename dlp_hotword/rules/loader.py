"""Rule set loader: mappings and YAML files to typed HotwordRule instances.

Two document shapes are accepted and may be mixed in one file.

Flat rules (``rules:``)::

    rules:
      - applies_to: [PERSON_NAME]
        pattern: patient
        window_before: 50
        window_after: 0          # optional, default 0
        adjustment:
          fixed: VERY_LIKELY     # or  relative: 1

Service-shaped rule sets (``rule_set:`` or ``ruleSet:``)::

    ruleSet:
      - infoTypes: [{name: PERSON_NAME}]
        rules:
          - hotwordRule:
              hotwordRegex: {pattern: patient}
              proximity: {windowBefore: 50}
              likelihoodAdjustment: {fixedLikelihood: VERY_LIKELY}

snake_case spellings of the service keys (``hotword_rule``,
``window_before``, ...) are accepted too.  Rule indices in errors count
flat rules first, then service rules, in document order.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from dlp_hotword.core.errors import ConfigurationError
from dlp_hotword.pii.likelihood import Likelihood, parse_likelihood
from dlp_hotword.pii.models import (
    Adjustment,
    FixedLikelihood,
    HotwordRule,
    RelativeLikelihood,
)

logger = logging.getLogger(__name__)

_FLAT_REQUIRED_FIELDS: frozenset[str] = frozenset({"pattern", "adjustment"})
_FLAT_KNOWN_FIELDS: frozenset[str] = _FLAT_REQUIRED_FIELDS | {
    "applies_to",
    "window_before",
    "window_after",
}
_ADJUSTMENT_KEYS: dict[str, str] = {
    "fixed_likelihood": "fixedLikelihood",
    "relative_likelihood": "relativeLikelihood",
}


def _get(data: Mapping[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in data:
        return data[camel]
    return data.get(snake, default)


def _window(value: Any, name: str, index: int) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer; got {value!r}", rule_index=index)
    if value < 0:
        raise ConfigurationError(f"{name} must be >= 0; got {value}", rule_index=index)
    return value


def _level(value: Any, index: int) -> Likelihood:
    try:
        return parse_likelihood(value)
    except ValueError as exc:
        raise ConfigurationError(str(exc), rule_index=index) from exc


def _relative(value: Any, index: int) -> RelativeLikelihood:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(
            f"relative adjustment must be an integer; got {value!r}", rule_index=index
        )
    return RelativeLikelihood(value)


def _adjustment(data: Any, fixed_key: str, relative_key: str, index: int) -> Adjustment:
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            f"adjustment must be a mapping; got {type(data).__name__}", rule_index=index
        )
    has_fixed = fixed_key in data
    has_relative = relative_key in data
    if has_fixed == has_relative:
        raise ConfigurationError(
            f"adjustment needs exactly one of {fixed_key!r} or {relative_key!r}",
            rule_index=index,
        )
    if has_fixed:
        return FixedLikelihood(_level(data[fixed_key], index))
    return _relative(data[relative_key], index)


def _labels(value: Any, index: int) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset({value})
    if not isinstance(value, Iterable):
        raise ConfigurationError(
            f"applies_to must be a list of info type labels; got {value!r}", rule_index=index
        )
    return frozenset(str(label) for label in value)


def _pattern(value: Any, index: int) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigurationError("pattern must be a non-empty string", rule_index=index)
    return value


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

def parse_rule(data: Mapping[str, Any], index: int = 0) -> HotwordRule:
    """Build a HotwordRule from a flat mapping.

    Raises
    ------
    ConfigurationError
        If a required field is missing or any value is malformed.
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            f"expected a mapping, got {type(data).__name__}", rule_index=index
        )

    missing = _FLAT_REQUIRED_FIELDS - data.keys()
    if missing:
        raise ConfigurationError(
            f"missing required fields: {sorted(missing)}", rule_index=index
        )
    unknown = data.keys() - _FLAT_KNOWN_FIELDS
    if unknown:
        raise ConfigurationError(f"unknown fields: {sorted(unknown)}", rule_index=index)

    return HotwordRule(
        pattern=_pattern(data["pattern"], index),
        adjustment=_adjustment(data["adjustment"], "fixed", "relative", index),
        applies_to=_labels(data.get("applies_to"), index),
        window_before=_window(data.get("window_before"), "window_before", index),
        window_after=_window(data.get("window_after"), "window_after", index),
    )


def parse_rule_set(entries: Iterable[Mapping[str, Any]], start_index: int = 0) -> list[HotwordRule]:
    """Flatten service-shaped ``ruleSet`` entries into HotwordRules.

    Only hotword rules are supported; any other rule kind (for example an
    exclusion rule) raises ConfigurationError.
    """
    rules: list[HotwordRule] = []
    index = start_index
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise ConfigurationError(
                f"rule set entry must be a mapping, got {type(entry).__name__}",
                rule_index=index,
            )
        info_types = _get(entry, "infoTypes", "info_types", [])
        if not isinstance(info_types, list):
            raise ConfigurationError(
                f"infoTypes must be a list; got {type(info_types).__name__}", rule_index=index
            )
        names = [it.get("name") if isinstance(it, Mapping) else it for it in info_types]
        if not all(isinstance(name, str) and name for name in names):
            raise ConfigurationError("every info type needs a name", rule_index=index)
        labels = frozenset(names)
        entry_rules = entry.get("rules", [])
        if not isinstance(entry_rules, list):
            raise ConfigurationError(
                f"rules must be a list; got {type(entry_rules).__name__}", rule_index=index
            )
        for raw in entry_rules:
            hotword = _get(raw, "hotwordRule", "hotword_rule") if isinstance(raw, Mapping) else None
            if not isinstance(hotword, Mapping):
                raise ConfigurationError(
                    "only hotword rules are supported in a rule set", rule_index=index
                )
            regex = _get(hotword, "hotwordRegex", "hotword_regex", {})
            proximity = hotword.get("proximity") or {}
            adjustment = _get(hotword, "likelihoodAdjustment", "likelihood_adjustment")
            if adjustment is None:
                raise ConfigurationError(
                    "missing required field: likelihoodAdjustment", rule_index=index
                )
            if isinstance(adjustment, Mapping):
                adjustment = {_ADJUSTMENT_KEYS.get(key, key): value for key, value in adjustment.items()}
            if not isinstance(proximity, Mapping):
                raise ConfigurationError("proximity must be a mapping", rule_index=index)
            rules.append(HotwordRule(
                pattern=_pattern(regex.get("pattern") if isinstance(regex, Mapping) else None, index),
                adjustment=_adjustment(adjustment, "fixedLikelihood", "relativeLikelihood", index),
                applies_to=labels,
                window_before=_window(
                    _get(proximity, "windowBefore", "window_before"), "windowBefore", index
                ),
                window_after=_window(
                    _get(proximity, "windowAfter", "window_after"), "windowAfter", index
                ),
            ))
            index += 1
    return rules


def load_rules(data: Any) -> list[HotwordRule]:
    """Build rules from a parsed document.

    *data* is either a list of flat rule mappings or a mapping holding
    ``rules`` and/or ``rule_set`` / ``ruleSet`` lists.
    """
    if isinstance(data, list):
        return [parse_rule(item, index) for index, item in enumerate(data)]
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            f"expected a mapping or a list of rules, got {type(data).__name__}"
        )

    flat = data.get("rules") or []
    rules = [parse_rule(item, index) for index, item in enumerate(flat)]
    service_entries = _get(data, "ruleSet", "rule_set", []) or []
    rules.extend(parse_rule_set(service_entries, start_index=len(rules)))
    return rules


def load_rule_file(path: str | Path) -> list[HotwordRule]:
    """Load the rules defined in a single YAML file.

    Raises
    ------
    ConfigurationError
        If the file is not valid YAML or any rule fails validation.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"{path}: invalid YAML: {exc}") from exc

    try:
        rules = load_rules(data)
    except ConfigurationError as exc:
        wrapped = ConfigurationError(f"{path}: {exc}")
        wrapped.rule_index = exc.rule_index
        raise wrapped from exc

    logger.info("Loaded %d hotword rule(s) from %s", len(rules), path.name)
    return rules


def load_rule_directory(directory: str | Path | None = None) -> list[HotwordRule]:
    """Load and concatenate every ``*.yaml`` rule file in *directory*.

    Files are read in name order so the resulting rule order, which
    decides how adjustments compose, is stable.  Defaults to the
    configured ``RULESET_DIR``.
    """
    if directory is None:
        from dlp_hotword.core.settings import get_settings

        directory = get_settings().ruleset_dir
    directory = Path(directory)
    rules: list[HotwordRule] = []
    for path in sorted(directory.iterdir()):
        if path.suffix not in (".yaml", ".yml"):
            continue
        rules.extend(load_rule_file(path))
    return rules


def custom_hotword_rule(
    hotword: str,
    info_types: Iterable[str] = ("PERSON_NAME",),
    window_before: int | None = None,
    level: Likelihood = Likelihood.VERY_LIKELY,
) -> HotwordRule:
    """Rule raising *info_types* matches to *level* when *hotword* precedes them.

    *window_before* defaults to the configured ``DEFAULT_WINDOW_BEFORE``.
    """
    if window_before is None:
        from dlp_hotword.core.settings import get_settings

        window_before = get_settings().default_window_before
    return HotwordRule(
        pattern=_pattern(hotword, 0),
        adjustment=FixedLikelihood(level),
        applies_to=_labels(info_types, 0),
        window_before=_window(window_before, "window_before", 0),
    )
