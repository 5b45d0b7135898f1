"""Inspect a string for PERSON_NAME findings boosted by a custom hotword.

Usage: python -m dlp_hotword "patient name: John Doe" patient

Prints the findings report to stdout; configuration errors are reported on
stderr with exit status 1.
"""
from __future__ import annotations

import logging
import sys

from dlp_hotword.core.errors import DlpHotwordError
from dlp_hotword.core.logging import setup_logging
from dlp_hotword.pii.finder import CandidateFinder
from dlp_hotword.pipeline import inspect_string_custom_hotword

logger = logging.getLogger("dlp_hotword.main")

USAGE = "usage: python -m dlp_hotword TEXT HOTWORD"


def _default_finder() -> CandidateFinder:
    from dlp_hotword.pii.presidio_finder import PresidioCandidateFinder

    return PresidioCandidateFinder()


def main(argv: list[str] | None = None, finder: CandidateFinder | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 2:
        print(USAGE, file=sys.stderr)
        return 2

    setup_logging()
    text, hotword = args
    try:
        report = inspect_string_custom_hotword(text, hotword, finder or _default_finder())
    except DlpHotwordError as exc:
        logger.error("Inspection failed: %s", exc)
        print(exc, file=sys.stderr)
        return 1
    print(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
