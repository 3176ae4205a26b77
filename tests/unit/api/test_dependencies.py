"""
Unit tests for API dependency injection.
"""

from types import SimpleNamespace

from chat_relay.api.dependencies import (
    get_completion_client,
    get_llm_client,
    get_prompt_builder,
    get_settings,
)
from chat_relay.retry.engine import RetryingCompletionClient


def fake_request(**state):
    return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(**state)))


def test_state_backed_dependencies(test_settings, prompt_builder, make_fake_client):
    client = make_fake_client()
    request = fake_request(settings=test_settings, llm_client=client, prompt_builder=prompt_builder)

    assert get_settings(request) is test_settings
    assert get_llm_client(request) is client
    assert get_prompt_builder(request) is prompt_builder


def test_get_completion_client_uses_retry_settings(test_settings, prompt_builder, make_fake_client):
    test_settings.MAX_RETRY_ATTEMPTS = 5
    test_settings.RETRY_INITIAL_DELAY_MS = 250
    test_settings.RETRY_MAX_DELAY_MS = 4000
    client = make_fake_client()

    engine = get_completion_client(client, prompt_builder, test_settings)

    assert isinstance(engine, RetryingCompletionClient)
    assert engine.llm_client is client
    assert engine.prompt_builder is prompt_builder
    assert engine.max_attempts == 5
    assert engine.initial_delay_ms == 250
    assert engine.max_delay_ms == 4000


def test_completion_client_not_cached(test_settings, prompt_builder, make_fake_client):
    client = make_fake_client()

    first = get_completion_client(client, prompt_builder, test_settings)
    second = get_completion_client(client, prompt_builder, test_settings)

    assert first is not second
