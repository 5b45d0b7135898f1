"""Error taxonomy for hotword rule evaluation.

ConfigurationError : a rule could not be built (bad pattern, missing field,
                     unknown likelihood, negative window).  Raised before any
                     match is processed.
InvalidMatchError  : a candidate match does not fit the text it claims to
                     come from.  Aborts the adjust() call it occurred in.

Both carry the index of the offending rule or match so callers can log or
surface it without inspecting the message.  Neither is retried.
"""
from __future__ import annotations


class DlpHotwordError(ValueError):
    """Base class for all errors raised by dlp_hotword."""


class ConfigurationError(DlpHotwordError):
    def __init__(self, message: str, rule_index: int | None = None) -> None:
        self.rule_index = rule_index
        if rule_index is not None:
            message = f"rule {rule_index}: {message}"
        super().__init__(message)


class InvalidMatchError(DlpHotwordError):
    def __init__(self, message: str, match_index: int | None = None) -> None:
        self.match_index = match_index
        if match_index is not None:
            message = f"match {match_index}: {message}"
        super().__init__(message)
