"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest

from tooltrack.config import AppConfig, load_config

ENV_VARS = (
    "TOOLTRACK_DATA_DIR",
    "TOOLTRACK_STORAGE",
    "TOOLTRACK_DEBOUNCE_MS",
    "TOOLTRACK_SEARCH_LIMIT",
    "TOOLTRACK_ADMIN_USERNAME",
    "TOOLTRACK_ADMIN_PASSWORD",
    "TOOLTRACK_LOG_LEVEL",
    "DEBUG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the picture
    monkeypatch.setattr("tooltrack.config.load_dotenv", lambda *args, **kwargs: False)


def test_defaults():
    config = load_config()

    assert config.storage == "file"
    assert config.debounce_ms == 300
    assert config.debounce_delay == 0.3
    assert config.search_limit == 10
    assert config.admin_username == "admin"
    assert config.effective_log_level == "INFO"
    assert config.in_memory is False


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("TOOLTRACK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TOOLTRACK_STORAGE", "Memory")
    monkeypatch.setenv("TOOLTRACK_DEBOUNCE_MS", "150")
    monkeypatch.setenv("TOOLTRACK_SEARCH_LIMIT", "0")
    monkeypatch.setenv("DEBUG", "true")

    config = load_config()

    assert config.data_dir == Path(tmp_path)
    assert config.in_memory is True
    assert config.debounce_delay == 0.15
    assert config.search_limit == 1
    assert config.effective_log_level == "DEBUG"


def test_invalid_integer(monkeypatch):
    monkeypatch.setenv("TOOLTRACK_DEBOUNCE_MS", "fast")

    with pytest.raises(ValueError, match="TOOLTRACK_DEBOUNCE_MS"):
        load_config()


def test_invalid_storage(monkeypatch):
    monkeypatch.setenv("TOOLTRACK_STORAGE", "postgres")

    with pytest.raises(ValueError, match="TOOLTRACK_STORAGE"):
        load_config()


def test_log_level_is_upper_cased():
    assert AppConfig(log_level="warning").effective_log_level == "WARNING"
