"""
Configuration settings for Chat Relay.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development (see .env.example).
"""

from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from chat_relay.llm.prompts import DEFAULT_SYSTEM_PROMPT


class ConfigurationError(Exception):
    """Raised when required configuration is missing at startup."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Chat Relay"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # === Upstream (OpenAI-compatible) ===
    OPENAI_API_KEY: Optional[SecretStr] = None  # Required, checked at startup
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_TIMEOUT: int = 30  # seconds
    OPENAI_MODEL: str = "gpt-3.5-turbo"

    # === LLM Generation Parameters ===
    LLM_MAX_TOKENS: int = 150
    LLM_TEMPERATURE: float = 0.7
    SYSTEM_PROMPT: str = DEFAULT_SYSTEM_PROMPT

    # === Retry ===
    MAX_RETRY_ATTEMPTS: int = 3
    RETRY_INITIAL_DELAY_MS: int = 1000  # Doubles after every rate-limited attempt
    RETRY_MAX_DELAY_MS: Optional[int] = None  # None = no cap

    # === Gateway ===
    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    RATE_LIMIT_MAX_REQUESTS: int = 30  # per client address
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    def require_api_key(self) -> str:
        """
        Return the upstream API key or fail.

        Raises:
            ConfigurationError: OPENAI_API_KEY is unset or blank
        """
        if self.OPENAI_API_KEY is None or not self.OPENAI_API_KEY.get_secret_value().strip():
            raise ConfigurationError("OPENAI_API_KEY is not defined in the environment.")
        return self.OPENAI_API_KEY.get_secret_value()


# Global settings instance
settings = Settings()
