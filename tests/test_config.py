"""
Tests for environment-driven configuration
"""

from datetime import date

import pytest

from wastewater_pipeline.coreutils.config import (
    DEFAULT_API_URL,
    PipelineConfig,
    load_config,
)

ENV_VARS = [
    "WASTEWATER_API_URL",
    "WASTEWATER_STORE_PATH",
    "WASTEWATER_BOOTSTRAP_START",
    "WASTEWATER_TIMEOUT",
    "WASTEWATER_MAX_RETRIES",
    "WASTEWATER_SCHEDULE_TIME",
    "LOG_LEVEL",
    "WASTEWATER_LOG_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = load_config()

    assert config == PipelineConfig()
    assert config.api_url == DEFAULT_API_URL
    assert config.store_path == "data/data.json"
    assert config.bootstrap_start == date(2022, 2, 1)
    assert config.timeout == 30
    assert config.max_retries == 0


def test_environment_values(monkeypatch):
    monkeypatch.setenv("WASTEWATER_STORE_PATH", "/srv/wastewater/data.json")
    monkeypatch.setenv("WASTEWATER_BOOTSTRAP_START", "2023-01-15")
    monkeypatch.setenv("WASTEWATER_TIMEOUT", "10")
    monkeypatch.setenv("WASTEWATER_MAX_RETRIES", "2")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = load_config()

    assert config.store_path == "/srv/wastewater/data.json"
    assert config.bootstrap_start == date(2023, 1, 15)
    assert config.timeout == 10
    assert config.max_retries == 2
    assert config.log_level == "DEBUG"


def test_blank_environment_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("WASTEWATER_TIMEOUT", "  ")

    assert load_config().timeout == 30


def test_overrides_win_and_none_is_ignored(monkeypatch):
    monkeypatch.setenv("WASTEWATER_STORE_PATH", "from-env.json")

    config = load_config(store_path="from-cli.json", log_level=None)

    assert config.store_path == "from-cli.json"
    assert config.log_level == "INFO"


@pytest.mark.parametrize(
    "name, value",
    [
        ("WASTEWATER_TIMEOUT", "soon"),
        ("WASTEWATER_TIMEOUT", "0"),
        ("WASTEWATER_MAX_RETRIES", "-1"),
        ("WASTEWATER_BOOTSTRAP_START", "01.02.2022"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        load_config()
