"""
LLM-specific data models for request/response cycle.

These models are internal to the LLM layer and describe the raw exchange
with the upstream chat-completion API. They are separate from the API
models (ChatRequest/ChatResponse) so the HTTP surface does not leak
provider details.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """Single message in a chat-completion conversation."""
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


class CompletionCallParameters(BaseModel):
    """
    Parameters for one upstream chat-completion call.

    Built by PromptBuilder for every request. Everything except the user
    message is fixed for the lifetime of the process.
    """
    model_config = ConfigDict(frozen=True)

    model: str = Field(..., description="Model identifier (e.g., 'gpt-3.5-turbo')")
    messages: tuple[ChatMessage, ...] = Field(..., min_length=1, description="System + user messages, in order")
    max_tokens: int = Field(default=150, ge=1, description="Maximum tokens to generate")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")

    @property
    def user_message(self) -> str:
        """Content of the last user-role message."""
        for message in reversed(self.messages):
            if message.role == "user":
                return message.content
        return ""

    def to_payload(self) -> dict:
        """Request body for POST /chat/completions."""
        return {
            "model": self.model,
            "messages": [m.model_dump() for m in self.messages],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }


class CompletionResult(BaseModel):
    """
    Parsed upstream completion.

    reply_text is the first choice's content with surrounding whitespace
    removed; the remaining fields are for logging and metrics only.
    """
    model_config = ConfigDict(frozen=True)

    reply_text: str = Field(..., description="Trimmed content of the first choice")
    model: str = Field(..., description="Model reported by the upstream")
    finish_reason: Optional[str] = Field(default=None, description="'stop', 'length', ...")
    prompt_tokens: Optional[int] = Field(default=None, ge=0, description="Tokens in prompt")
    completion_tokens: Optional[int] = Field(default=None, ge=0, description="Tokens in completion")
    latency_ms: int = Field(default=0, ge=0, description="Round-trip latency in milliseconds")
    attempts: int = Field(default=1, ge=1, description="Attempts used (1 = first try)")
