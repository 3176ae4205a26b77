"""FastAPI middleware for request tracing and per-client rate limiting."""

import math
import time
import uuid
from typing import Callable, Iterable

import structlog
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from chat_relay.api.rate_limit import SlidingWindowRateLimiter
from chat_relay.monitoring.metrics import rate_limit_rejections_total

logger = structlog.get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID tracing to all requests.

    Features:
    - Generates unique request_id (UUID4) for each request
    - Binds request_id to structlog context (appears in all logs)
    - Adds X-Request-ID response header for client correlation
    - Logs request start/end with duration
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """Process request with tracing context."""
        request_id = str(uuid.uuid4())

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )

        logger.info("Request started")

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start_time) * 1000

            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "Request failed",
                exc_info=exc,
                duration_ms=round(duration_ms, 2),
            )
            raise

        finally:
            # Prevent leakage to other requests
            structlog.contextvars.clear_contextvars()


class ClientRateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects requests from a client address that exceeded its quota.

    Only requests to one of `paths` or a subpath of it (`/chat`, `/chat/...`)
    are counted. CORS preflight (OPTIONS) requests are never counted.
    """

    def __init__(
        self,
        app: ASGIApp,
        limiter: SlidingWindowRateLimiter,
        paths: Iterable[str] = ("/chat",),
    ):
        super().__init__(app)
        self.limiter = limiter
        self.paths = tuple(p.rstrip("/") for p in paths)

    def _is_limited(self, path: str) -> bool:
        return any(path == p or path.startswith(p + "/") for p in self.paths)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        if request.method == "OPTIONS" or not self._is_limited(request.url.path):
            return await call_next(request)

        client_key = request.client.host if request.client else "unknown"
        allowed, retry_after = self.limiter.hit(client_key)
        if not allowed:
            rate_limit_rejections_total.inc()
            logger.warning("Client rate limit exceeded", client=client_key, retry_after=round(retry_after, 2))
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"reply": RATE_LIMIT_MESSAGE},
                headers={"Retry-After": str(max(1, math.ceil(retry_after)))},
            )

        return await call_next(request)
