"""
API request and response models for the FastAPI endpoints.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Inbound chat message.

    `message` is optional at the schema level so an absent or empty value
    gets the fixed "No message provided." reply instead of a 422.
    """

    message: Optional[str] = Field(
        default=None,
        description="User message forwarded to the upstream model",
        examples=["What is a honeypot contract?"],
    )


class ChatResponse(BaseModel):
    """Reply for every /chat outcome (success and failure alike)."""

    reply: str = Field(description="Generated reply or error text")


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health: healthy, unhealthy",
        examples=["healthy", "unhealthy"]
    )
    version: str = Field(description="Application version")
    upstream: str = Field(description="Upstream API status: ok, unreachable")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Health check timestamp (UTC)"
    )
