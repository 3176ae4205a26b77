"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for LLM clients
- OpenAIChatClient: Client for OpenAI-compatible chat-completion APIs
- PromptBuilder: Builds system + user messages for each call
- exceptions: LLM-specific exceptions
"""

from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.llm.exceptions import (
    LLMAuthenticationError,
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMResponseFormatError,
    LLMTimeoutError,
)
from chat_relay.llm.openai_client import OpenAIChatClient
from chat_relay.llm.prompt_builder import PromptBuilder

__all__ = [
    "BaseLLMClient",
    "OpenAIChatClient",
    "PromptBuilder",
    "LLMClientError",
    "LLMConnectionError",
    "LLMTimeoutError",
    "LLMGenerationError",
    "LLMAuthenticationError",
    "LLMResponseFormatError",
    "LLMRateLimitError",
]
