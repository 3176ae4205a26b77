"""
OpenAI-compatible chat-completion client.

Communicates with the upstream API using httpx AsyncClient. Supports:
- Bearer-token authentication
- Connection pooling via a persistent AsyncClient
- Status-code classification into the LLMClientError taxonomy
- Health checks via GET /models

The client makes exactly one request per generate() call. Rate-limit
retries live in chat_relay.retry.
"""

import time
from typing import Any, Optional

import httpx
import structlog
from pydantic import ValidationError

from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMResponseFormatError,
    LLMTimeoutError,
)
from chat_relay.models.llm_models import CompletionCallParameters, CompletionResult
from chat_relay.monitoring.metrics import llm_latency_seconds, llm_tokens_total


logger = structlog.get_logger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Extract a human-readable message from an upstream error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return response.reason_phrase


class OpenAIChatClient(BaseLLMClient):
    """
    Client for POST /chat/completions on an OpenAI-compatible API.

    API Endpoints:
    - POST /chat/completions: Generate a chat completion
    - GET /models: Lightweight reachability check

    Status mapping:
    - 429 -> LLMRateLimitError (retryable)
    - 401/403 -> LLMAuthenticationError
    - other 4xx/5xx -> LLMGenerationError
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: int = 30,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: Bearer credential for the upstream
            base_url: API root, including the version prefix
            timeout: Request timeout in seconds
            connection_limits: httpx connection pool limits (default: 20 max connections)
            transport: Optional httpx transport (tests use httpx.MockTransport)
            **kwargs: Additional config
        """
        super().__init__(base_url, timeout, **kwargs)

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
                keepalive_expiry=30.0
            )

        self._api_key = api_key
        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = connection_limits
        self._transport = transport

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    async def generate(self, params: CompletionCallParameters) -> CompletionResult:
        """
        Generate a completion via POST /chat/completions.

        Payload:
        {
            "model": "gpt-3.5-turbo",
            "messages": [{"role": "system", ...}, {"role": "user", ...}],
            "max_tokens": 150,
            "temperature": 0.7
        }

        Response:
        {
            "model": "gpt-3.5-turbo-0125",
            "choices": [{"message": {"role": "assistant", "content": "..."},
                         "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 230, "completion_tokens": 42}
        }
        """
        start_time = time.time()

        logger.debug(
            "Sending chat completion request",
            model=params.model,
            message_length=len(params.user_message),
            max_tokens=params.max_tokens,
            temperature=params.temperature,
        )

        try:
            client = await self._get_client()
            response = await client.post("/chat/completions", json=params.to_payload())
        except httpx.TimeoutException as e:
            llm_latency_seconds.labels(model=params.model, success="false").observe(time.time() - start_time)
            raise LLMTimeoutError(
                f"Request timeout after {self.timeout}s",
                details={"timeout": self.timeout, "error_type": type(e).__name__}
            ) from e
        except httpx.RequestError as e:
            llm_latency_seconds.labels(model=params.model, success="false").observe(time.time() - start_time)
            raise LLMConnectionError(
                f"Network error: {str(e) or type(e).__name__}",
                details={"error_type": type(e).__name__}
            ) from e

        latency_ms = int((time.time() - start_time) * 1000)

        if response.is_error:
            llm_latency_seconds.labels(model=params.model, success="false").observe(latency_ms / 1000.0)
            self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as e:
            # Covers JSONDecodeError and undecodable (non UTF-8) bodies
            raise LLMResponseFormatError(
                "Invalid JSON response from upstream",
                details={"parse_error": str(e)}
            ) from e

        content, finish_reason = self._first_choice(data)
        usage = data.get("usage")
        if not isinstance(usage, dict):
            usage = {}

        try:
            result = CompletionResult(
                reply_text=content.strip(),
                model=data.get("model", params.model),
                finish_reason=finish_reason,
                prompt_tokens=usage.get("prompt_tokens"),
                completion_tokens=usage.get("completion_tokens"),
                latency_ms=latency_ms,
            )
        except ValidationError as e:
            llm_latency_seconds.labels(model=params.model, success="false").observe(latency_ms / 1000.0)
            raise LLMResponseFormatError(
                "Upstream response has invalid field types",
                details={"errors": e.errors(include_url=False)}
            ) from e

        logger.info(
            "Chat completion successful",
            model=result.model,
            latency_ms=latency_ms,
            prompt_tokens=result.prompt_tokens,
            completion_tokens=result.completion_tokens,
            finish_reason=result.finish_reason,
        )

        llm_latency_seconds.labels(model=params.model, success="true").observe(latency_ms / 1000.0)
        if result.prompt_tokens:
            llm_tokens_total.labels(model=params.model, token_type="prompt").inc(result.prompt_tokens)
        if result.completion_tokens:
            llm_tokens_total.labels(model=params.model, token_type="completion").inc(result.completion_tokens)

        return result

    @staticmethod
    def _first_choice(data: Any) -> tuple[str, Optional[str]]:
        """Return (content, finish_reason) of choices[0] or raise LLMResponseFormatError."""
        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or not choices:
            raise LLMResponseFormatError(
                "Upstream response contained no choices",
                details={"response": data}
            )
        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise LLMResponseFormatError(
                "Upstream response choice has no text content",
                details={"choice": first}
            )
        return content, first.get("finish_reason")

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        """Translate an error status into the matching LLMClientError."""
        status_code = response.status_code
        message = _error_message(response)
        details = {"status": status_code, "error": message}

        if status_code == 429:
            retry_after = response.headers.get("Retry-After")
            if retry_after is not None:
                details["retry_after"] = retry_after
            logger.warning("Upstream rate limited request", **details)
            raise LLMRateLimitError(f"Upstream rate limited the request (HTTP 429): {message}", details=details)

        logger.error("Upstream HTTP error", **details)
        if status_code in (401, 403):
            raise LLMAuthenticationError(f"Upstream rejected credentials (HTTP {status_code}): {message}", details=details)
        raise LLMGenerationError(f"Upstream returned HTTP {status_code}: {message}", details=details)

    async def health_check(self) -> bool:
        """
        Check upstream reachability via GET /models.

        Returns True if server responds with 2xx, False otherwise.
        """
        try:
            client = await self._get_client()
            response = await client.get("/models", timeout=5.0)
            response.raise_for_status()
            logger.debug("Upstream health check passed")
            return True
        except Exception as e:
            logger.warning("Upstream health check failed", error=str(e))
            return False

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed upstream client connection")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
