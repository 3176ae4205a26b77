"""
Abstract base client for LLM inference.

Defines the interface the retry engine relies on. The engine only ever
calls generate(); health_check() and close() serve the API layer.
"""

from abc import ABC, abstractmethod

import structlog

from chat_relay.models.llm_models import CompletionCallParameters, CompletionResult


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for upstream completion clients.

    Responsibilities:
    - Send one chat-completion request to the upstream
    - Parse the response into CompletionResult
    - Translate transport/status failures into LLMClientError subclasses

    Does NOT handle:
    - Prompt construction (that's PromptBuilder's job)
    - Retrying rate-limited calls (that's RetryingCompletionClient's job)
    """

    def __init__(self, base_url: str, timeout: int = 30, **kwargs):
        """
        Initialize base client.

        Args:
            base_url: Base URL of the upstream API (e.g., https://api.openai.com/v1)
            timeout: Request timeout in seconds
            **kwargs: Additional provider-specific config
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.extra_config = kwargs

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
        )

    @abstractmethod
    async def generate(self, params: CompletionCallParameters) -> CompletionResult:
        """
        Perform a single upstream call. No retries.

        Args:
            params: Model, messages and sampling parameters

        Returns:
            CompletionResult with the trimmed first-choice text

        Raises:
            LLMRateLimitError: Upstream signalled rate limiting
            LLMAuthenticationError: Credential rejected
            LLMGenerationError: Any other non-success status
            LLMResponseFormatError: Success status but unusable body
            LLMConnectionError: Network failure
            LLMTimeoutError: Request exceeded timeout
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the upstream is reachable.

        Returns:
            True if reachable, False otherwise

        Note:
            This should NOT raise exceptions - return False on error.
        """
        pass

    async def close(self):
        """
        Close client connections and cleanup resources.

        Default implementation does nothing.
        """
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
