"""
Configuration management for the subscription relay.

All configuration comes from environment variables or .env file.
The settings object is frozen: it is built once at process start and
handed to the components that need it.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from functools import lru_cache

from config.constants import PAYPAL_LIVE_API_URL, PAYPAL_SANDBOX_API_URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RELAY_",
        case_sensitive=False,
        extra="ignore",
        frozen=True
    )

    # PayPal credentials
    paypal_client_id: str = ""
    paypal_secret: str = ""

    # "production" selects the live PayPal API, anything else the sandbox
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Outbound calls
    http_timeout: float = 10.0
    automation_webhook_url: str = ""

    # AI completion proxy
    ai_proxy_api_key: str = ""
    ai_proxy_base_url: str = "https://api.deepseek.com"
    ai_proxy_model: str = "deepseek-chat"

    # CORS
    cors_origins: list[str] = ["*"]

    # Rate limiting (client-facing routes only)
    rate_limit_enabled: bool = True
    rate_limit: str = "60/minute"

    # Observability
    log_level: str = "INFO"
    log_file: str = ""
    sentry_dsn: str = ""
    sentry_environment: str = "development"
    sentry_traces_sample_rate: float = 0.1

    # Validators
    @field_validator('environment')
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator('http_timeout')
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        """Outbound calls must always be bounded."""
        if v <= 0:
            raise ValueError("http_timeout must be a positive number of seconds")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def paypal_api_url(self) -> str:
        """PayPal REST base URL for the configured deployment mode."""
        return PAYPAL_LIVE_API_URL if self.is_production else PAYPAL_SANDBOX_API_URL

    @property
    def paypal_configured(self) -> bool:
        return bool(self.paypal_client_id and self.paypal_secret)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
