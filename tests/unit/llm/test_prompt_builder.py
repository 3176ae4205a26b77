"""
Unit tests for PromptBuilder and the call parameter models.
"""

import pytest
from pydantic import ValidationError

from chat_relay.llm.prompt_builder import PromptBuilder
from chat_relay.llm.prompts import DEFAULT_SYSTEM_PROMPT


def test_defaults_match_upstream_contract():
    builder = PromptBuilder()

    params = builder.build("hello")

    assert builder.system_prompt == DEFAULT_SYSTEM_PROMPT
    assert params.model == "gpt-3.5-turbo"
    assert params.max_tokens == 150
    assert params.temperature == 0.7
    assert params.messages[0].role == "system"
    assert params.messages[0].content == DEFAULT_SYSTEM_PROMPT
    assert params.messages[1].role == "user"
    assert params.user_message == "hello"


def test_payload_shape():
    builder = PromptBuilder(system_prompt="persona", model="m", max_tokens=10, temperature=0.2)

    payload = builder.build("hi").to_payload()

    assert payload == {
        "model": "m",
        "messages": [
            {"role": "system", "content": "persona"},
            {"role": "user", "content": "hi"},
        ],
        "max_tokens": 10,
        "temperature": 0.2,
    }


def test_only_user_message_varies():
    builder = PromptBuilder(system_prompt="persona")

    first = builder.build("one")
    second = builder.build("two")

    assert first.messages[0] == second.messages[0]
    assert first.user_message == "one"
    assert second.user_message == "two"


def test_parameters_are_frozen():
    params = PromptBuilder().build("hello")

    with pytest.raises(ValidationError):
        params.max_tokens = 999


def test_empty_message_rejected():
    with pytest.raises(ValueError):
        PromptBuilder().build("")


def test_empty_system_prompt_rejected():
    with pytest.raises(ValueError):
        PromptBuilder(system_prompt="")


def test_system_prompt_mentions_persona():
    assert DEFAULT_SYSTEM_PROMPT.startswith("You are Salis AI")
    assert "UNDER NO CIRCUMSTANCES" in DEFAULT_SYSTEM_PROMPT
