"""Tests for environment-driven gateway settings."""

from __future__ import annotations

import pytest

from completion_gateway.config import GatewaySettings

_ENV_KEYS = [
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_MODEL",
    "OPENAI_MAX_TOKENS",
    "OPENAI_TEMPERATURE",
    "OPENAI_EMBEDDING_MODEL",
    "OPENAI_TIMEOUT",
    "OPENAI_CHAT_MODEL_MARKERS",
]


@pytest.fixture()
def clean_env(monkeypatch, tmp_path):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)


def test_defaults(clean_env):
    settings = GatewaySettings()

    assert settings.api_key == ""
    assert settings.model == "gpt-4-turbo-preview"
    assert settings.max_tokens == 1000
    assert settings.temperature == 0.7
    assert settings.embedding_model == "text-embedding-ada-002"
    assert settings.timeout == 30.0
    assert settings.chat_model_markers == ["gpt"]


def test_reads_prefixed_environment(clean_env, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("OPENAI_MAX_TOKENS", "256")
    monkeypatch.setenv("OPENAI_TEMPERATURE", "0.1")
    monkeypatch.setenv("OPENAI_CHAT_MODEL_MARKERS", '["gpt", "o3"]')

    settings = GatewaySettings()

    assert settings.api_key == "sk-from-env"
    assert settings.model == "gpt-4o-mini"
    assert settings.max_tokens == 256
    assert settings.temperature == 0.1
    assert settings.chat_model_markers == ["gpt", "o3"]


def test_reads_dotenv_file(clean_env, tmp_path):
    (tmp_path / ".env").write_text("OPENAI_MODEL=gpt-from-dotenv\n", encoding="utf-8")

    assert GatewaySettings().model == "gpt-from-dotenv"


def test_require_api_key(clean_env):
    with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
        GatewaySettings().require_api_key()

    assert GatewaySettings(api_key="sk-x").require_api_key() == "sk-x"


def test_settings_are_immutable(clean_env):
    settings = GatewaySettings()

    with pytest.raises(Exception):  # noqa: B017
        settings.model = "other"  # type: ignore[misc]
