"""
Custom exceptions for the LLM client layer.

These exceptions let the retry engine tell a transient rate-limit signal
apart from every other upstream failure. Only LLMRateLimitError is retried;
everything else is surfaced to the caller on the first occurrence.
"""


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to connect to the upstream API.

    Includes network errors, DNS failures, refused connections, etc.
    Not retried.
    """
    pass


class LLMTimeoutError(LLMConnectionError):
    """Raised when the upstream call exceeds the configured timeout."""
    pass


class LLMGenerationError(LLMClientError):
    """
    Raised when the upstream returns a non-success status.

    Examples:
    - Invalid parameters (400)
    - Model not found (404)
    - Provider outage (5xx)
    """
    pass


class LLMAuthenticationError(LLMGenerationError):
    """Raised on 401/403: the API key was rejected."""
    pass


class LLMResponseFormatError(LLMGenerationError):
    """
    Raised when a success response cannot be parsed.

    Covers invalid JSON, a missing or empty "choices" array, and a first
    choice without string content.
    """
    pass


class LLMRateLimitError(LLMClientError):
    """
    Raised when the upstream rate-limits the request (HTTP 429).

    This error type triggers exponential backoff retry.
    """
    pass
