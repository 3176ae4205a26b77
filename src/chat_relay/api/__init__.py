"""
FastAPI API routes and endpoints.

- routes.py: POST /chat, GET /health, GET /
- dependencies.py: Dependency injection for the upstream and retrying clients
- middleware.py: Request tracing and per-client rate limiting
- rate_limit.py: Sliding window quota keyed by client address
- models.py: API request/response models
- error_handlers.py: Exception handlers for structured error responses
"""

from chat_relay.api import dependencies, error_handlers, models
from chat_relay.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
