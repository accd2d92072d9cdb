"""
RectSizer Backend: Application Configuration
============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a module-level `settings` object.
Who:   Read by the application factory; passed down to the store and service.
When:  Loaded once at module import time; tests build their own `Settings`.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development.
    Attributes are grouped by concern.
    """

    # ── Rectangle State ───────────────────────────────────────────────────
    # What: Whether the current dimensions are mirrored to a JSON file
    # False: in-memory only, the value resets to the default on restart
    persistence_enabled: bool = Field(default=True)

    # What: Location of the durable record, relative to the backend CWD
    rectangle_record_path: str = Field(
        default="./rectangle-config.json",
        description="JSON file holding the last committed dimensions",
    )

    # What: Value used on first start (or when the record is unusable)
    # Not passed through the width <= height rule
    default_width: float = Field(default=80.0)
    default_height: float = Field(default=100.0)

    # ── Validation ────────────────────────────────────────────────────────
    # What: Pause before every validation of a submitted rectangle
    # The browser client shows its pending state for this long; tests use 0
    validation_delay_seconds: float = Field(default=10.0, ge=0, le=300)

    # What: Mounts POST /api/rectangle/validate (check without committing)
    expose_validate_endpoint: bool = Field(default=False)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def record_path(self) -> Optional[str]:
        """Path of the durable record, or None for the in-memory variant."""
        return self.rectangle_record_path if self.persistence_enabled else None

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

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

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Module-level instance used by `app.main:app`
settings = Settings()
