"""
API routes: chat relay, health check and service info.
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from chat_relay.api.dependencies import (
    get_completion_client,
    get_llm_client,
    get_settings,
)
from chat_relay.api.error_handlers import no_message_response
from chat_relay.api.models import ChatRequest, ChatResponse, HealthResponse
from chat_relay.config import Settings
from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.monitoring.metrics import chat_requests_total
from chat_relay.retry.engine import RetryingCompletionClient

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/chat",
    response_model=ChatResponse,
    status_code=status.HTTP_200_OK,
    summary="Relay a message to the language model",
    responses={
        200: {"description": "Reply generated"},
        400: {"description": "No message provided", "model": ChatResponse},
        429: {"description": "Client exceeded its request quota", "model": ChatResponse},
        500: {"description": "Upstream failure", "model": ChatResponse},
    },
)
async def chat(
    request: ChatRequest,
    completion_client: RetryingCompletionClient = Depends(get_completion_client),
):
    """
    Forward one message upstream and return the reply.

    Args:
        request: ChatRequest with the user message
        completion_client: Retrying completion client (injected)

    Returns:
        ChatResponse with the generated reply

    Raises:
        LLMClientError: Upstream failure (handled as 500 with the message)
        RetryExhausted: Every attempt was rate limited (handled as 500)
    """
    if not request.message:
        chat_requests_total.labels(status="invalid").inc()
        logger.info("Rejected chat request without message")
        return no_message_response()

    reply = await completion_client.get_completion(request.message)

    chat_requests_total.labels(status="success").inc()
    return ChatResponse(reply=reply)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={
        200: {"description": "Upstream reachable"},
        503: {"description": "Upstream unreachable"},
    },
)
async def health_check(
    llm_client: BaseLLMClient = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
):
    """Report whether the upstream API is reachable."""
    healthy = await llm_client.health_check()

    response = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=settings.APP_VERSION,
        upstream="ok" if healthy else "unreachable",
        timestamp=datetime.now(timezone.utc),
    )
    logger.info("Health check", status=response.status)

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )


@router.get("/")
async def root(settings: Settings = Depends(get_settings)):
    """Root endpoint with service information."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "chat": "/chat",
        "health": "/health",
        "docs": "/docs",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }
