"""
FastAPI application entry point for Chat Relay.
"""

import sys
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from chat_relay.api.error_handlers import EXCEPTION_HANDLERS
from chat_relay.api.middleware import ClientRateLimitMiddleware, RequestTracingMiddleware
from chat_relay.api.rate_limit import SlidingWindowRateLimiter
from chat_relay.api.routes import router
from chat_relay.config import ConfigurationError, Settings, settings as default_settings
from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.llm.openai_client import OpenAIChatClient
from chat_relay.llm.prompt_builder import PromptBuilder
from chat_relay.logging_config import configure_logging

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    llm_client: Optional[BaseLLMClient] = None,
) -> FastAPI:
    """
    Build the ASGI application.

    Args:
        settings: Application settings (defaults to the environment-loaded instance)
        llm_client: Upstream client; an OpenAIChatClient is created at startup when omitted

    Returns:
        Configured FastAPI app. Startup fails with ConfigurationError
        when OPENAI_API_KEY is missing.
    """
    if settings is None:
        settings = default_settings

    app = FastAPI(
        title=settings.APP_NAME,
        description="Relays chat messages to an OpenAI-compatible completion API",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.llm_client = llm_client
    app.state.prompt_builder = PromptBuilder(
        system_prompt=settings.SYSTEM_PROMPT,
        model=settings.OPENAI_MODEL,
        max_tokens=settings.LLM_MAX_TOKENS,
        temperature=settings.LLM_TEMPERATURE,
    )

    # Middleware added last runs first: tracing wraps CORS wraps rate limiting
    app.add_middleware(
        ClientRateLimitMiddleware,
        limiter=SlidingWindowRateLimiter(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            time_window=settings.RATE_LIMIT_WINDOW_SECONDS,
        ),
        paths=("/chat",),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTracingMiddleware)

    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)

    app.include_router(router, tags=["chat"])

    @app.on_event("startup")
    async def startup():
        """Verify configuration and open the upstream client."""
        api_key = settings.require_api_key()
        if app.state.llm_client is None:
            app.state.llm_client = OpenAIChatClient(
                api_key=api_key,
                base_url=settings.OPENAI_BASE_URL,
                timeout=settings.OPENAI_TIMEOUT,
            )
        logger.info(
            "Application startup",
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
            upstream_base_url=settings.OPENAI_BASE_URL,
            model=settings.OPENAI_MODEL,
            max_retry_attempts=settings.MAX_RETRY_ATTEMPTS,
        )

    @app.on_event("shutdown")
    async def shutdown():
        """Close pooled upstream connections."""
        if app.state.llm_client is not None:
            await app.state.llm_client.close()
        logger.info("Application shutdown complete")

    if settings.PROMETHEUS_ENABLED:
        Instrumentator().instrument(app).expose(app)

    return app


# Configure structured logging before the app is built
configure_logging(default_settings.LOG_LEVEL, default_settings.ENVIRONMENT)

app = create_app()


def run() -> None:
    """Console entry point: validate configuration, then serve with uvicorn."""
    import uvicorn

    try:
        default_settings.require_api_key()
    except ConfigurationError as e:
        logger.error("Refusing to start", error=str(e))
        sys.exit(1)

    logger.info("Server is starting", host=default_settings.HOST, port=default_settings.PORT)
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
