"""Reporter: render adjusted findings for the console or as JSON.

Text output mirrors the inspection service sample::

    Findings: 1

    InfoType: PERSON_NAME
    \tQuote: John Doe
    \tLikelihood: VERY_LIKELY

or ``No findings.`` when the list is empty.  Quotes are the inspected
text itself, so rendered reports must be written to the console or a
file, never to the logs.
"""
from __future__ import annotations

import json
from typing import Sequence

from dlp_hotword.pii.models import AdjustedFinding


def render_text(text: str, findings: Sequence[AdjustedFinding]) -> str:
    if not findings:
        return "No findings."

    lines = [f"Findings: {len(findings)}", ""]
    for finding in findings:
        lines.append(f"InfoType: {finding.info_type}")
        lines.append(f"\tQuote: {finding.quote(text)}")
        lines.append(f"\tLikelihood: {finding.final_likelihood.name}")
        lines.append("")
    return "\n".join(lines).rstrip("\n")


def finding_to_dict(text: str, finding: AdjustedFinding) -> dict:
    return {
        "info_type": finding.info_type,
        "quote": finding.quote(text),
        "start": finding.span.start,
        "end": finding.span.end,
        "original_likelihood": finding.original_likelihood.name,
        "likelihood": finding.final_likelihood.name,
        "matched_hotword": finding.matched_hotword,
    }


def render_json(text: str, findings: Sequence[AdjustedFinding], indent: int | None = 2) -> str:
    """Serialise *findings* as ``{"findings": [...]}`` with keys in a fixed order."""
    payload = {"findings": [finding_to_dict(text, f) for f in findings]}
    return json.dumps(payload, indent=indent, ensure_ascii=False)
