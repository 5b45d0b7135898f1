"""Tests for dlp_hotword/__main__.py: the inspect-string entry point."""
from __future__ import annotations

import logging
import re

import pytest

from dlp_hotword.__main__ import main
from dlp_hotword.core.logging import PIISafeFilter
from dlp_hotword.pii.likelihood import Likelihood
from dlp_hotword.pii.models import Match, Span


class NameFinder:
    def find(self, text, info_types):
        return [
            Match("PERSON_NAME", Span(m.start(), m.end()), Likelihood.POSSIBLE)
            for m in re.finditer(r"[A-Z][a-z]+ [A-Z][a-z]+", text)
        ]


@pytest.fixture(autouse=True)
def _restore_package_logger():
    logger = logging.getLogger("dlp_hotword")
    saved = (logger.level, logger.handlers[:], logger.propagate)
    yield
    logger.level, logger.handlers, logger.propagate = saved[0], saved[1], saved[2]


def test_prints_report(capsys):
    assert main(["patient name: John Doe", "patient"], finder=NameFinder()) == 0
    out = capsys.readouterr().out
    assert "Findings: 1" in out
    assert "\tQuote: John Doe" in out
    assert "\tLikelihood: VERY_LIKELY" in out


def test_configures_logging():
    main(["John Doe", "patient"], finder=NameFinder())
    handlers = logging.getLogger("dlp_hotword").handlers
    assert any(isinstance(f, PIISafeFilter) for h in handlers for f in h.filters)


def test_bad_hotword_exits_one(capsys):
    assert main(["John Doe", "("], finder=NameFinder()) == 1
    assert "invalid hotword pattern" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [[], ["only text"], ["a", "b", "c"]])
def test_wrong_argument_count_prints_usage(argv, capsys):
    assert main(argv, finder=NameFinder()) == 2
    assert "usage:" in capsys.readouterr().err
