"""
Rate-limit retry with exponential backoff.

Main Components:
    - RetryingCompletionClient: Calls the upstream, retrying on HTTP 429
    - RetryState / RetryPhase: Per-call state machine (attempt, delay)
    - RetryExhausted: Raised when every attempt was rate limited

Usage:
    >>> from chat_relay.retry import RetryingCompletionClient
    >>> engine = RetryingCompletionClient(llm_client, prompt_builder)
    >>> reply = await engine.get_completion("hello")
"""

from chat_relay.retry.engine import RetryingCompletionClient
from chat_relay.retry.exceptions import RetryExhausted
from chat_relay.retry.state import RetryPhase, RetryState

__all__ = [
    "RetryingCompletionClient",
    "RetryExhausted",
    "RetryPhase",
    "RetryState",
]
