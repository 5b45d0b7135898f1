"""Presidio candidate finder: raw PERSON_NAME (and other) matches for the engine.

Wraps Microsoft Presidio AnalyzerEngine.  Info types are requested with the
inspection service's names (PERSON_NAME, EMAIL_ADDRESS, ...) and translated
to Presidio entity names on the way in and back on the way out, so rules
written against the service's names keep working.

spaCy model weights are loaded from the local installation: no outbound
network calls are made at runtime.

Never log raw text values: only info_type and likelihood appear in log output.
"""
from __future__ import annotations

import logging
from typing import Iterable

from presidio_analyzer import AnalyzerEngine
from presidio_analyzer.nlp_engine import NlpEngineProvider

from dlp_hotword.pii.finder import score_to_likelihood
from dlp_hotword.pii.models import Match, Span

logger = logging.getLogger(__name__)

# Service info type → Presidio entity type.  Unlisted names pass through.
INFO_TYPE_TO_ENTITY: dict[str, str] = {
    "PERSON_NAME": "PERSON",
    "EMAIL_ADDRESS": "EMAIL_ADDRESS",
    "PHONE_NUMBER": "PHONE_NUMBER",
    "CREDIT_CARD_NUMBER": "CREDIT_CARD",
    "US_SOCIAL_SECURITY_NUMBER": "US_SSN",
    "IP_ADDRESS": "IP_ADDRESS",
    "LOCATION": "LOCATION",
    "DATE": "DATE_TIME",
    "IBAN_CODE": "IBAN_CODE",
}
ENTITY_TO_INFO_TYPE: dict[str, str] = {v: k for k, v in INFO_TYPE_TO_ENTITY.items()}


def _resolve_spacy_model() -> str:
    """Pick the best available spaCy model: trf > lg > md > sm."""
    try:
        import spacy.util
        for name in ("en_core_web_trf", "en_core_web_lg", "en_core_web_md", "en_core_web_sm"):
            if spacy.util.is_package(name):
                return name
    except (ImportError, ModuleNotFoundError):
        pass
    return "en_core_web_lg"  # Presidio's own default; it raises a clear error at init time


def build_analyzer(language: str = "en") -> AnalyzerEngine:
    """Create an AnalyzerEngine over the best locally installed spaCy model."""
    nlp_configuration = {
        "nlp_engine_name": "spacy",
        "models": [{"lang_code": language, "model_name": _resolve_spacy_model()}],
    }
    nlp_engine = NlpEngineProvider(nlp_configuration=nlp_configuration).create_engine()
    return AnalyzerEngine(nlp_engine=nlp_engine, supported_languages=[language])


class PresidioCandidateFinder:
    """CandidateFinder backed by Presidio.

    One instance should be created per process (model loading is expensive).
    Pass *analyzer* to reuse an existing engine.
    """

    def __init__(self, analyzer: AnalyzerEngine | None = None, language: str | None = None) -> None:
        if language is None:
            from dlp_hotword.core.settings import get_settings

            language = get_settings().presidio_language
        self._language = language
        self._analyzer = analyzer if analyzer is not None else build_analyzer(language)

    def find(self, text: str, info_types: Iterable[str]) -> list[Match]:
        """Return one Match per Presidio hit of the requested info types."""
        entities = [INFO_TYPE_TO_ENTITY.get(name, name) for name in info_types]
        hits = self._analyzer.analyze(text=text, language=self._language, entities=entities)

        matches: list[Match] = []
        for hit in sorted(hits, key=lambda h: (h.start, h.end)):
            if hit.end <= hit.start:
                continue
            info_type = ENTITY_TO_INFO_TYPE.get(hit.entity_type, hit.entity_type)
            likelihood = score_to_likelihood(hit.score)

            # SAFETY: log only metadata: never the matched text span
            logger.debug(
                "Candidate: info_type=%s score=%.3f likelihood=%s",
                info_type,
                hit.score,
                likelihood.name,
            )
            matches.append(Match(
                info_type=info_type,
                span=Span(hit.start, hit.end),
                likelihood=likelihood,
            ))
        return matches
