"""Configuration management with pydantic-settings.

Provides type-safe configuration with environment variable validation.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === DominioDZ API ===
    dominio_token: str | None = Field(None, description="DominioDZ API token")
    dominio_endpoint: str = Field(
        "https://nodejsback.dominiodz.com/sconsultas/procedimientogen2",
        description="DominioDZ generic procedure endpoint",
    )
    dominio_empresa: str = Field("CONTI", description="Company code sent in every envelope")
    dominio_usuario: str = Field("consultas", description="API user")
    dominio_cusert: str = Field("CUSERT", description="Certificate user")
    dominio_procedimiento: str = Field("apiconsultas", description="Stored procedure name")
    dominio_guser: str = Field("conti", description="Group user for paramjs2")
    dominio_max_concurrency: int = Field(
        4, ge=1, description="Max concurrent upstream calls per request"
    )

    # === HTTP client ===
    http_timeout_seconds: int = Field(30, description="HTTP request timeout in seconds")
    http_max_retries: int = Field(2, ge=1, description="Maximum HTTP attempts per call")
    http_backoff_base: float = Field(0.5, description="HTTP retry backoff base delay")
    http_backoff_max: float = Field(4.0, description="HTTP retry backoff max delay")

    # === Circuit breaker settings ===
    cb_fail_threshold: int = Field(5, description="Circuit breaker failure threshold")
    cb_reset_timeout: float = Field(30.0, description="Circuit breaker reset timeout in seconds")

    # === Web server ===
    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(8000, description="Bind port")
    app_env: str = Field("development", description="Deployment environment name")
    cors_origins: str = Field("*", description="Comma-separated allowed CORS origins")

    # === Logging ===
    log_level: str = Field("INFO", description="Root log level")
    log_file: str | None = Field(None, description="JSON log file path (None = stdout only)")

    # === Business rules ===
    search_default_limit: int = Field(20, description="Default product search result limit")
    search_max_limit: int = Field(200, description="Upper bound for product search limit")

    @property
    def has_dominio_token(self) -> bool:
        """Whether an upstream credential is configured."""
        return bool(self.dominio_token and self.dominio_token.strip())

    @property
    def allowed_origins(self) -> list[str]:
        """Get list of allowed CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()] or ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises:
        RuntimeError: If an environment variable has an invalid value.

    """
    try:
        return Settings()
    except ValidationError as e:
        bad_fields = [str(error["loc"][0]).upper() for error in e.errors() if error["loc"]]
        error_msg = (
            f"Configuration error: invalid environment variables: "
            f"{', '.join(bad_fields)}\n"
            f"Please fix them in .env file or the process environment."
        )
        raise RuntimeError(error_msg) from e


__all__ = ["Settings", "get_settings"]
