"""
FastAPI exception handlers for structured error responses.

Every response body uses the same {"reply": ...} shape as a successful
chat reply so browser clients can render errors without special casing.
"""

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chat_relay.llm.exceptions import LLMClientError
from chat_relay.monitoring.metrics import chat_requests_total
from chat_relay.retry.exceptions import RetryExhausted

logger = structlog.get_logger(__name__)

NO_MESSAGE_REPLY = "No message provided."
FAILURE_REPLY_PREFIX = "Sorry, something went wrong: "
INTERNAL_ERROR_REPLY = "Internal server error"


def no_message_response() -> JSONResponse:
    """400 reply for a missing or empty message."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"reply": NO_MESSAGE_REPLY},
    )


def completion_failure_response(exc: Exception) -> JSONResponse:
    """500 reply carrying the failure's message (never a traceback)."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"reply": f"{FAILURE_REPLY_PREFIX}{exc}"},
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle malformed request bodies (not JSON, wrong field types).

    Maps to 400 with the fixed no-message reply.
    """
    logger.warning("Invalid request body", errors=exc.errors())
    return no_message_response()


async def completion_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle upstream and retry failures raised by the chat route.

    Maps to 500 with the failure message.
    """
    chat_requests_total.labels(status="error").inc()
    logger.error(
        "Error from upstream API",
        error_type=type(exc).__name__,
        error=str(exc),
        details=getattr(exc, "details", None),
    )
    return completion_failure_response(exc)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception("Unhandled error", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"reply": INTERNAL_ERROR_REPLY},
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    RequestValidationError: request_validation_error_handler,
    LLMClientError: completion_error_handler,
    RetryExhausted: completion_error_handler,
    Exception: generic_error_handler,
}
