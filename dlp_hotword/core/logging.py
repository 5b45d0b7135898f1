"""Logging setup for dlp_hotword and its PII-safe record filter.

Records from this package carry only metadata (info_type, likelihood names,
rule and match indices, counts).  PIISafeFilter is the backstop for anything
else reaching the console handler: values logged as ``quote=``, ``text=``,
``window=``, ``hotword=`` or ``pattern=`` are replaced, and free-standing
emails, SSNs, card and phone numbers are redacted wherever they appear.
"""
import logging
import logging.config
import re

_KEYED_VALUE = re.compile(
    r"(?i)\b((?:quote|text|window|matched_hotword|hotword|pattern)\s*[=:]\s*)"
    r"('[^']*'|\"[^\"]*\"|[^,\s]+)"
)
PII_PATTERNS = [
    re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"),
    re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),
    re.compile(r"\b(?:\d[ -]?){13,16}\b"),
    re.compile(r"\b(?:\+1[-.\s]?)?\(?\d{3}\)?[-.\s]\d{3}[-.\s]\d{4}\b"),
]
REDACTED = "[REDACTED]"


class PIISafeFilter(logging.Filter):
    def _sanitize(self, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return type(value)(self._sanitize(item) for item in value)
        if not isinstance(value, str):
            return value

        redacted = _KEYED_VALUE.sub(rf"\1{REDACTED}", value)
        for pattern in PII_PATTERNS:
            redacted = pattern.sub(REDACTED, redacted)
        return redacted

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self._sanitize(record.msg)

        if isinstance(record.args, tuple):
            record.args = tuple(self._sanitize(item) for item in record.args)
        elif isinstance(record.args, dict):
            record.args = {key: self._sanitize(value) for key, value in record.args.items()}

        return True


def setup_logging(level: str | None = None) -> None:
    """Send dlp_hotword and Presidio records to stderr through PIISafeFilter.

    *level* defaults to the configured ``LOG_LEVEL``.  The root logger is
    left alone so an embedding application keeps its own configuration.
    """
    from dlp_hotword.core.settings import get_settings

    level = (level or get_settings().log_level).upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "pii_safe": {
                    "()": "dlp_hotword.core.logging.PIISafeFilter",
                }
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "default",
                    "filters": ["pii_safe"],
                }
            },
            "loggers": {
                "dlp_hotword": {
                    "handlers": ["stderr"],
                    "level": level,
                    "propagate": False,
                },
                "presidio-analyzer": {
                    "handlers": ["stderr"],
                    "level": "WARNING",
                    "propagate": False,
                },
            },
        }
    )
