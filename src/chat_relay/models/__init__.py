"""
Data models for Chat Relay.

- llm_models: upstream call parameters and parsed completions
"""

from chat_relay.models.llm_models import (
    ChatMessage,
    CompletionCallParameters,
    CompletionResult,
)

__all__ = [
    "ChatMessage",
    "CompletionCallParameters",
    "CompletionResult",
]
