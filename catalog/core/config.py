"""Catalog API configuration.

Settings are read from environment variables and an optional ``.env`` file.
"""

import logging
import secrets
from functools import lru_cache
from typing import Literal

from pydantic import Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from catalog import __version__

logger = logging.getLogger(__name__)

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Secrets shorter than this are accepted but reported at startup
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Catalog API settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Catalog API"
    app_version: str = __version__
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    # Logging
    log_level: str = "INFO"
    log_format: Literal["structured", "dev"] = "dev"

    # JWT
    jwt_secret_key: str = ""
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = Field(default=15, gt=0)
    jwt_refresh_token_expire_hours: int = Field(default=24, gt=0)

    # Subject placed in tokens issued by the login stand-in
    login_subject_id: int = 999

    # CORS (comma separated)
    cors_origins: str = "http://localhost:3000"

    enable_metrics: bool = False

    _generated_secret: str = PrivateAttr(default_factory=lambda: secrets.token_urlsafe(48))

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        algorithm = v.upper()
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"jwt_algorithm must be an HMAC algorithm: {', '.join(HMAC_ALGORITHMS)}")
        return algorithm

    @property
    def effective_jwt_secret_key(self) -> str:
        """Configured JWT secret, or a random one generated once for this process."""
        return self.jwt_secret_key or self._generated_secret

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def check_security_configuration(self) -> list[str]:
        """Return warnings about insecure settings. Logged at startup."""
        warnings: list[str] = []
        if not self.jwt_secret_key:
            warnings.append(
                "JWT_SECRET_KEY is not set; using a generated secret. "
                "Tokens will not survive a restart."
            )
        elif len(self.jwt_secret_key) < MIN_SECRET_LENGTH:
            warnings.append(
                f"JWT_SECRET_KEY is shorter than {MIN_SECRET_LENGTH} characters."
            )
        if self.debug:
            warnings.append("DEBUG is enabled; API docs are publicly exposed.")
        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
