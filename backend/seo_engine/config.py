"""
SEO Engine Backend: Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
       An invalid PORT fails before the server ever tries to bind.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the docs registry, and the server entry point.
When:  Loaded once at module import time; `serve()` reloads from the
       environment so a restarted process picks up a new PORT.

Nothing here is required at runtime: every field has a working default,
so the container needs no config file or volume.
"""

from typing import List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from seo_engine import __version__


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Server ────────────────────────────────────────────────────────────
    # What: Bind address and port for uvicorn
    # PORT is the only knob the deployment platform is expected to set
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, ge=1, le=65535, description="Listening port")

    # What: Controls verbosity of application logging
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── API Documentation ─────────────────────────────────────────────────
    # What: Metadata rendered into the manifest's `info` object
    api_title: str = Field(default="SEO Engine API")
    api_version: str = Field(default=__version__)
    api_description: str = Field(default="SEO engine API service")

    # What: Documentation mount points
    # docs_url serves the Swagger UI page, openapi_url the JSON document it fetches
    docs_url: str = Field(default="/docs")
    openapi_url: str = Field(default="/api-docs/openapi.json")

    @field_validator("docs_url", "openapi_url")
    @classmethod
    def validate_mount_path(cls, v: str) -> str:
        """Mount paths are absolute URL paths."""
        if not v.startswith("/"):
            raise ValueError(f"Documentation path '{v}' must start with '/'")
        return v.rstrip("/") or "/"

    @model_validator(mode="after")
    def validate_distinct_mounts(self) -> "Settings":
        """The Swagger UI page and its document cannot share one path."""
        if self.docs_url == self.openapi_url:
            raise ValueError(
                f"docs_url and openapi_url must differ (both are '{self.docs_url}')"
            )
        return self

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated origins, "*" allows any
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # PORT and port both work
    }

    @property
    def base_url(self) -> str:
        """Human-facing server URL used in startup log lines."""
        return f"http://{self.host}:{self.port}"


# Singleton instance: imported throughout the application
settings = Settings()
