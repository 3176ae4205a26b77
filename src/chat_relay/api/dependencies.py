"""
FastAPI dependency injection for Chat Relay.

Long-lived resources (settings, LLM client, prompt builder) are created once
per application and stored on app.state. The retrying client is built per
request because it is lightweight and holds no per-call state itself.
"""

from fastapi import Depends, Request

from chat_relay.config import Settings
from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.llm.prompt_builder import PromptBuilder
from chat_relay.retry.engine import RetryingCompletionClient


def get_settings(request: Request) -> Settings:
    """Application settings for this app instance."""
    return request.app.state.settings


def get_llm_client(request: Request) -> BaseLLMClient:
    """
    Shared upstream client with connection pooling.

    Created during application startup.
    """
    return request.app.state.llm_client


def get_prompt_builder(request: Request) -> PromptBuilder:
    """Shared prompt builder holding the fixed system prompt."""
    return request.app.state.prompt_builder


def get_completion_client(
    llm_client: BaseLLMClient = Depends(get_llm_client),
    prompt_builder: PromptBuilder = Depends(get_prompt_builder),
    settings: Settings = Depends(get_settings),
) -> RetryingCompletionClient:
    """
    Create retrying completion client with injected dependencies.

    Args:
        llm_client: Upstream client singleton (injected)
        prompt_builder: Prompt builder singleton (injected)
        settings: Application settings (injected)

    Returns:
        RetryingCompletionClient instance
    """
    return RetryingCompletionClient(
        llm_client=llm_client,
        prompt_builder=prompt_builder,
        max_attempts=settings.MAX_RETRY_ATTEMPTS,
        initial_delay_ms=settings.RETRY_INITIAL_DELAY_MS,
        max_delay_ms=settings.RETRY_MAX_DELAY_MS,
    )
