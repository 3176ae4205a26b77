"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

from typing import Callable, Iterable, Union

import pytest

from chat_relay.config import Settings
from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.llm.exceptions import LLMRateLimitError
from chat_relay.llm.prompt_builder import PromptBuilder
from chat_relay.models.llm_models import CompletionCallParameters, CompletionResult

Outcome = Union[str, Exception]


class FakeLLMClient(BaseLLMClient):
    """Scripted upstream client.

    Each call to generate() consumes the next outcome: a string becomes the
    reply content, an exception instance is raised. The last outcome repeats
    once the script runs out.
    """

    def __init__(self, outcomes: Iterable[Outcome] = ("hi there",)):
        super().__init__(base_url="http://fake-upstream", timeout=1)
        self.outcomes = list(outcomes)
        self.calls: list[CompletionCallParameters] = []
        self.healthy = True
        self.closed = False

    async def generate(self, params: CompletionCallParameters) -> CompletionResult:
        self.calls.append(params)
        index = min(len(self.calls) - 1, len(self.outcomes) - 1)
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return CompletionResult(reply_text=outcome, model=params.model)

    async def health_check(self) -> bool:
        return self.healthy

    async def close(self):
        self.closed = True


def _rate_limit_error() -> LLMRateLimitError:
    """A fresh upstream 429 error."""
    return LLMRateLimitError(
        "Upstream rate limited the request (HTTP 429): Rate limit reached",
        details={"status": 429},
    )


class RecordingSleep:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    .env is ignored so the developer's local configuration cannot leak in.
    """
    return Settings(
        _env_file=None,
        APP_NAME="Chat Relay (Test)",
        ENVIRONMENT="development",
        LOG_LEVEL="DEBUG",
        OPENAI_API_KEY="sk-test",
        OPENAI_BASE_URL="http://fake-upstream/v1",
        MAX_RETRY_ATTEMPTS=3,
        RETRY_INITIAL_DELAY_MS=0,  # No real waiting in API tests
        RATE_LIMIT_MAX_REQUESTS=30,
        RATE_LIMIT_WINDOW_SECONDS=60,
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def prompt_builder() -> PromptBuilder:
    """Prompt builder with a short system prompt."""
    return PromptBuilder(system_prompt="You are a test assistant.")


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_fake_client() -> Callable[..., FakeLLMClient]:
    """Factory fixture for scripted upstream clients.

    Usage:
        def test_something(make_fake_client):
            client = make_fake_client([rate_limited(), "ok"])
    """
    def _create(outcomes: Iterable[Outcome] = ("hi there",)) -> FakeLLMClient:
        return FakeLLMClient(outcomes)

    return _create


@pytest.fixture
def rate_limited() -> Callable[[], LLMRateLimitError]:
    """Factory for upstream 429 errors (one fresh instance per call)."""
    return _rate_limit_error
