"""Unit tests for Settings loading and validation."""

from pathlib import Path

import pytest

from corpus_search.config import Settings


@pytest.mark.unit
def test_settings_defaults():
    settings = Settings()

    assert settings.max_results == 1000
    assert settings.default_page_size == 20
    assert settings.log_level == "info"
    assert settings.corpus_data_dir is None
    assert settings.uses_file_corpora() is False


@pytest.mark.unit
def test_settings_read_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("MAX_RESULTS", "250")
    monkeypatch.setenv("CORPUS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_LEVEL", " DEBUG ")

    settings = Settings()

    assert settings.max_results == 250
    assert settings.corpus_data_dir == Path(tmp_path)
    assert settings.uses_file_corpora() is True
    assert settings.log_level == "debug"


@pytest.mark.unit
def test_settings_reject_unknown_log_level():
    with pytest.raises(ValueError, match="log_level"):
        Settings(log_level="verbose")


@pytest.mark.unit
def test_page_size_is_clamped_to_result_cap():
    settings = Settings(max_results=10, default_page_size=50)

    assert settings.default_page_size == 10


@pytest.mark.unit
def test_small_result_cap_from_environment_starts(monkeypatch):
    monkeypatch.setenv("MAX_RESULTS", "5")
    monkeypatch.delenv("DEFAULT_PAGE_SIZE")

    settings = Settings()

    assert (settings.max_results, settings.default_page_size) == (5, 5)


@pytest.mark.unit
def test_settings_reject_non_positive_limits():
    with pytest.raises(ValueError):
        Settings(max_results=0)


@pytest.mark.unit
def test_get_logger_levels_parses_overrides():
    settings = Settings(logger_levels="corpus_search.search=debug, noise ,opentelemetry = error,=info")

    assert settings.get_logger_levels() == {"corpus_search.search": "debug", "opentelemetry": "error"}
