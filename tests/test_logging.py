import logging

import pytest

from dlp_hotword.core.logging import PIISafeFilter, setup_logging


@pytest.fixture
def filtered_logger():
    logger = logging.getLogger("test.pii")
    logger.setLevel(logging.INFO)
    logger.filters = []
    logger.addFilter(PIISafeFilter())
    yield logger
    logger.filters = []


@pytest.fixture
def package_logger():
    logger = logging.getLogger("dlp_hotword")
    saved = (logger.level, logger.handlers[:], logger.propagate)
    yield logger
    logger.level, logger.handlers, logger.propagate = saved[0], saved[1], saved[2]


def test_pii_filter_redacts_email_and_ssn(caplog, filtered_logger):
    with caplog.at_level(logging.INFO, logger="test.pii"):
        filtered_logger.info("Contact john.doe@example.com SSN 123-45-6789")

    assert "john.doe@example.com" not in caplog.text
    assert "123-45-6789" not in caplog.text
    assert "[REDACTED]" in caplog.text


def test_pii_filter_redacts_keyed_values(caplog, filtered_logger):
    with caplog.at_level(logging.INFO, logger="test.pii"):
        filtered_logger.info("finding quote='John Doe' hotword=patient likelihood=LIKELY")

    assert "John Doe" not in caplog.text
    assert "patient" not in caplog.text
    assert "quote=[REDACTED]" in caplog.text
    assert "hotword=[REDACTED]" in caplog.text
    assert "likelihood=LIKELY" in caplog.text


def test_pii_filter_keeps_engine_metadata(caplog, filtered_logger):
    with caplog.at_level(logging.INFO, logger="test.pii"):
        filtered_logger.info(
            "Hotword: info_type=%s original=%s final=%s rules_fired=%s",
            "PERSON_NAME", "POSSIBLE", "VERY_LIKELY", [0, 2],
        )

    assert (
        "Hotword: info_type=PERSON_NAME original=POSSIBLE final=VERY_LIKELY rules_fired=[0, 2]"
        in caplog.text
    )


def test_pii_filter_sanitizes_list_args(caplog, filtered_logger):
    with caplog.at_level(logging.INFO, logger="test.pii"):
        filtered_logger.info("info_types=%s count=%d", ["PERSON_NAME", "jane@example.org"], 3)

    assert "jane@example.org" not in caplog.text
    assert "PERSON_NAME" in caplog.text
    assert "count=3" in caplog.text


def test_setup_logging_configures_package_logger(monkeypatch, package_logger):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root_handlers = logging.getLogger().handlers[:]

    setup_logging()

    assert package_logger.level == logging.DEBUG
    assert package_logger.propagate is False
    assert any(
        isinstance(f, PIISafeFilter) for h in package_logger.handlers for f in h.filters
    )
    assert logging.getLogger().handlers == root_handlers


def test_setup_logging_explicit_level(package_logger):
    setup_logging("warning")
    assert package_logger.level == logging.WARNING
