"""Tests for environment-driven configuration."""

import pytest

from hireflow_screening.config import MAX_CANDIDATE_TURNS, get_config

_ENV_VARS = [
    "GOOGLE_CLOUD_PROJECT", "GOOGLE_APPLICATION_CREDENTIALS", "GEMINI_API_KEY",
    "HIREFLOW_CHAT_MODEL", "HIREFLOW_EVAL_MODEL", "HIREFLOW_VERTEX_LOCATION",
    "HIREFLOW_MAX_CANDIDATE_TURNS", "HIREFLOW_PHONE_REGION", "HIREFLOW_LOG_FILE", "HIREFLOW_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_requires_backend_credentials():
    with pytest.raises(ValueError):
        get_config()


def test_api_key_defaults(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "abc")

    config = get_config()

    assert config.gemini_api_key == "abc"
    assert config.google_cloud_project is None
    assert config.max_candidate_turns == MAX_CANDIDATE_TURNS


def test_overrides(monkeypatch):
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "acme-hr")
    monkeypatch.setenv("HIREFLOW_MAX_CANDIDATE_TURNS", "6")
    monkeypatch.setenv("HIREFLOW_PHONE_REGION", "GB")
    monkeypatch.setenv("HIREFLOW_EVAL_MODEL", "gemini-2.5-pro")

    config = get_config()

    assert config.google_cloud_project == "acme-hr"
    assert config.max_candidate_turns == 6
    assert config.phone_region == "GB"
    assert config.eval_model == "gemini-2.5-pro"


@pytest.mark.parametrize("value", ["0", "many"])
def test_invalid_turn_ceiling(monkeypatch, value):
    monkeypatch.setenv("GEMINI_API_KEY", "abc")
    monkeypatch.setenv("HIREFLOW_MAX_CANDIDATE_TURNS", value)

    with pytest.raises(ValueError):
        get_config()
