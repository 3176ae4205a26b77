"""
Prompt builder for upstream chat-completion calls.

Holds the process-wide prompt configuration (system prompt, model,
generation limits) and turns a user message into CompletionCallParameters.
The builder is immutable once constructed and safe to share between
concurrent requests.
"""

import structlog

from chat_relay.llm.prompts import DEFAULT_SYSTEM_PROMPT
from chat_relay.models.llm_models import ChatMessage, CompletionCallParameters


logger = structlog.get_logger(__name__)


class PromptBuilder:
    """
    Builds the system + user message pair for every call.

    Attributes:
        system_prompt: Fixed persona/policy instruction
        model: Upstream model identifier
        max_tokens: Output token limit
        temperature: Sampling temperature
    """

    __slots__ = ("_system_message", "_model", "_max_tokens", "_temperature")

    def __init__(
        self,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        model: str = "gpt-3.5-turbo",
        max_tokens: int = 150,
        temperature: float = 0.7,
    ):
        if not system_prompt:
            raise ValueError("system_prompt must not be empty")
        self._system_message = ChatMessage(role="system", content=system_prompt)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

        logger.info(
            "PromptBuilder initialized",
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            system_prompt_length=len(system_prompt),
        )

    @property
    def system_prompt(self) -> str:
        return self._system_message.content

    @property
    def model(self) -> str:
        return self._model

    @property
    def max_tokens(self) -> int:
        return self._max_tokens

    @property
    def temperature(self) -> float:
        return self._temperature

    def build(self, user_message: str) -> CompletionCallParameters:
        """
        Build call parameters for a user message.

        Args:
            user_message: Non-empty text from the caller

        Returns:
            Frozen CompletionCallParameters

        Raises:
            ValueError: user_message is empty
        """
        if not user_message:
            raise ValueError("user_message must not be empty")

        return CompletionCallParameters(
            model=self._model,
            messages=(
                self._system_message,
                ChatMessage(role="user", content=user_message),
            ),
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )
