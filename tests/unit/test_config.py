"""
Unit tests for Settings loading and credential checks.
"""

import pytest

from chat_relay.config import ConfigurationError, Settings
from chat_relay.llm.prompts import DEFAULT_SYSTEM_PROMPT


def test_defaults(monkeypatch):
    for name in ("OPENAI_API_KEY", "PORT", "MAX_RETRY_ATTEMPTS", "RATE_LIMIT_MAX_REQUESTS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.PORT == 3000
    assert settings.OPENAI_MODEL == "gpt-3.5-turbo"
    assert settings.LLM_MAX_TOKENS == 150
    assert settings.LLM_TEMPERATURE == 0.7
    assert settings.MAX_RETRY_ATTEMPTS == 3
    assert settings.RETRY_INITIAL_DELAY_MS == 1000
    assert settings.RETRY_MAX_DELAY_MS is None
    assert settings.CORS_ALLOW_ORIGINS == ["*"]
    assert settings.RATE_LIMIT_MAX_REQUESTS == 30
    assert settings.RATE_LIMIT_WINDOW_SECONDS == 60
    assert settings.SYSTEM_PROMPT == DEFAULT_SYSTEM_PROMPT


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("RETRY_MAX_DELAY_MS", "8000")

    settings = Settings(_env_file=None)

    assert settings.require_api_key() == "sk-env"
    assert settings.PORT == 8080
    assert settings.RETRY_MAX_DELAY_MS == 8000


@pytest.mark.parametrize("value", [None, "", "   "])
def test_missing_api_key_is_configuration_error(value):
    settings = Settings(_env_file=None, OPENAI_API_KEY=value)

    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        settings.require_api_key()


def test_api_key_hidden_from_repr():
    settings = Settings(_env_file=None, OPENAI_API_KEY="sk-secret")

    assert "sk-secret" not in repr(settings)
