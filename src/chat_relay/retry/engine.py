"""
Retrying completion client.

This module implements RetryingCompletionClient, the single entry point
for "get a completion for this user message". It masks transient upstream
rate limiting by retrying with exponential backoff and surfaces every other
failure immediately.

Retry Policy:
    1. Call the upstream once per attempt (up to max_attempts)
    2. Rate limited with attempts left: wait current delay, double it, retry
    3. Rate limited on the last attempt: raise RetryExhausted
    4. Any other error: re-raise unchanged, no retry

Usage:
    engine = RetryingCompletionClient(llm_client, prompt_builder)
    reply = await engine.get_completion("hello")
"""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.llm.exceptions import LLMRateLimitError
from chat_relay.llm.prompt_builder import PromptBuilder
from chat_relay.models.llm_models import CompletionResult
from chat_relay.monitoring.metrics import retry_exhausted_total, upstream_retries_total
from chat_relay.retry.exceptions import RetryExhausted
from chat_relay.retry.state import RetryState

logger = structlog.get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class RetryingCompletionClient:
    """
    Upstream completion with rate-limit retries.

    The instance only holds read-only collaborators and defaults; all
    mutable retry bookkeeping lives in a RetryState created per call, so one
    instance can serve any number of concurrent requests.

    Attributes:
        llm_client: Upstream client (one call per attempt)
        prompt_builder: Builds call parameters from the user message
        max_attempts: Default attempt limit
        initial_delay_ms: Default first backoff delay
        max_delay_ms: Optional backoff ceiling (None = unbounded doubling)
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        prompt_builder: PromptBuilder,
        max_attempts: int = 3,
        initial_delay_ms: int = 1000,
        max_delay_ms: Optional[int] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """
        Initialize retrying client.

        Args:
            llm_client: Upstream client
            prompt_builder: Prompt builder with the fixed system prompt
            max_attempts: Default attempt limit (>= 1)
            initial_delay_ms: Default first backoff delay in milliseconds
            max_delay_ms: Optional backoff ceiling in milliseconds
            sleep: Awaitable sleep used between attempts (seconds)
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must be >= 0")

        self.llm_client = llm_client
        self.prompt_builder = prompt_builder
        self.max_attempts = max_attempts
        self.initial_delay_ms = initial_delay_ms
        self.max_delay_ms = max_delay_ms
        self._sleep = sleep

    async def get_completion(
        self,
        user_message: str,
        max_attempts: Optional[int] = None,
        initial_delay_ms: Optional[int] = None,
    ) -> str:
        """
        Return the trimmed reply text for a user message.

        Args:
            user_message: Non-empty message text
            max_attempts: Per-call override of the attempt limit
            initial_delay_ms: Per-call override of the first backoff delay

        Returns:
            Reply text of the first choice, whitespace stripped

        Raises:
            RetryExhausted: Every attempt was rate limited
            LLMClientError: Any non-rate-limit upstream failure (not retried)
            ValueError: Empty message or invalid limits
        """
        result = await self.complete(user_message, max_attempts, initial_delay_ms)
        return result.reply_text

    async def complete(
        self,
        user_message: str,
        max_attempts: Optional[int] = None,
        initial_delay_ms: Optional[int] = None,
    ) -> CompletionResult:
        """Same as get_completion() but returns the full CompletionResult."""
        state = RetryState(
            max_attempts=self.max_attempts if max_attempts is None else max_attempts,
            current_delay_ms=self.initial_delay_ms if initial_delay_ms is None else initial_delay_ms,
            max_delay_ms=self.max_delay_ms,
        )
        params = self.prompt_builder.build(user_message)

        while not state.is_terminal:
            try:
                result = await self.llm_client.generate(params)

            except LLMRateLimitError as e:
                if state.is_last_attempt:
                    state.fail()
                    retry_exhausted_total.inc()
                    logger.error(
                        "Rate limited on final attempt, giving up",
                        attempt=state.attempt,
                        max_attempts=state.max_attempts,
                        delays_ms=state.delays_ms,
                    )
                    raise RetryExhausted(
                        attempts=state.attempt,
                        delays_ms=state.delays_ms,
                        last_error=e,
                    ) from e

                delay_ms = state.schedule_retry()
                logger.warning(
                    f"Rate limited. Attempt {state.attempt} of {state.max_attempts}. "
                    f"Retrying in {delay_ms}ms...",
                    attempt=state.attempt,
                    max_attempts=state.max_attempts,
                    remaining_attempts=state.remaining_attempts,
                    delay_ms=delay_ms,
                )
                upstream_retries_total.labels(reason="rate_limited").inc()
                await self._sleep(delay_ms / 1000)
                state.advance()
                continue

            except Exception as e:
                state.fail()
                logger.error(
                    "Upstream call failed, not retrying",
                    attempt=state.attempt,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise

            state.succeed()
            if state.attempt > 1:
                logger.info("Completion succeeded after retry", attempts=state.attempt)
            return result.model_copy(
                update={"reply_text": result.reply_text.strip(), "attempts": state.attempt}
            )

        # Unreachable while the loop above returns or raises on every attempt
        raise RetryExhausted(attempts=state.attempt, delays_ms=state.delays_ms)
