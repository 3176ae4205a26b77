"""
Chat Relay.

Accepts a user message over POST /chat, forwards it to an OpenAI-compatible
chat-completion API behind a fixed system prompt, and returns the reply.
Upstream rate limiting (HTTP 429) is absorbed with exponential backoff.

Architecture: FastAPI gateway + httpx upstream client + retry state machine
"""

__version__ = "0.1.0"
