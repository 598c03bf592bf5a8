"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from finforecast.services.months import MONTH_NAMES


class Settings(BaseSettings):
    """Central settings pulled from .env / environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_env: str = "development"
    log_level: str = "INFO"
    service_name: str = "SME Financial Forecast API"
    service_version: str = "1.0.0"

    # FastAPI
    fastapi_host: str = "0.0.0.0"
    fastapi_port: int = 8080

    # Forecasting
    month_locale: str = "en"
    """Month-name calendar used for record matching and forecast labels ("en" or "tr")."""

    # Rate Limiting
    rate_limit_enabled: bool = True
    rate_limit_analyze: int = 60
    """Max analyze requests per client per minute."""

    # Security Headers
    enable_security_headers: bool = True
    allowed_origins: str = "*"
    """Comma-separated list of allowed CORS origins. Use '*' only in development."""

    @field_validator("month_locale")
    @classmethod
    def _known_locale(cls, value: str) -> str:
        value = value.lower()
        if value not in MONTH_NAMES:
            raise ValueError(f"month_locale must be one of {sorted(MONTH_NAMES)}")
        return value


settings = Settings()
