import pytest

from dlp_hotword.core.settings import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "LOG_LEVEL",
        "RULESET_DIR",
        "DEFAULT_WINDOW_BEFORE",
        "DEFAULT_INFO_TYPES",
        "MIN_LIKELIHOOD",
        "PRESIDIO_LANGUAGE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
