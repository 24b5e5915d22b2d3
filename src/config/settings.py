# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDER ===
    llm_provider: Literal["google", "anthropic"] = "google"
    llm_model: str = "gemini-1.5-flash"

    # Provider API keys
    google_api_key: str = ""
    anthropic_api_key: str = ""

    # === Food extraction stage ===
    food_max_retries: int = 5
    food_retry_delay_s: float = 1.0
    food_timeout_s: float = 30.0
    food_temperature: float = 0.3
    food_max_tokens: int = 4096

    # === Health suitability stage ===
    health_max_retries: int = 3
    health_retry_delay_s: float = 1.0
    health_timeout_s: float = 90.0
    health_temperature: float = 0.1
    health_max_tokens: int = 8192

    # === Cache ===
    cache_enabled: bool = True
    cache_root: Path = Path("~/.nutriguard/cache")
    cache_ttl_hours: float = 24.0

    # === Uploads ===
    upload_max_size_mb: float = 10.0
    upload_allowed_extensions: str = ".jpg,.jpeg,.png,.webp,.heic,.heif"
    upload_allowed_mime_types: str = (
        "image/jpeg,image/png,image/webp,image/heic,image/heif"
    )

    # === Profiles ===
    profile_root: Path = Path("~/.nutriguard/profiles")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("food_max_retries", "health_max_retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("retry counts must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.food_timeout_s <= 0 or self.health_timeout_s <= 0:
            errors.append("stage timeouts must be > 0")

        if self.food_retry_delay_s < 0 or self.health_retry_delay_s < 0:
            errors.append("retry delays must be >= 0")

        if self.cache_enabled and self.cache_ttl_hours <= 0:
            errors.append("CACHE_TTL_HOURS must be > 0 when caching is enabled")

        if self.upload_max_size_mb <= 0:
            errors.append("UPLOAD_MAX_SIZE_MB must be > 0")

        if not self.allowed_extensions_list:
            errors.append("UPLOAD_ALLOWED_EXTENSIONS must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def allowed_extensions_list(self) -> list[str]:
        """Parse comma-separated extensions, normalized to lowercase with a dot."""
        exts = []
        for e in self.upload_allowed_extensions.split(","):
            e = e.strip().lower()
            if e:
                exts.append(e if e.startswith(".") else f".{e}")
        return exts

    @property
    def allowed_mime_types_list(self) -> list[str]:
        """Parse comma-separated MIME types."""
        return [
            m.strip().lower()
            for m in self.upload_allowed_mime_types.split(",")
            if m.strip()
        ]

    @property
    def upload_max_size_bytes(self) -> int:
        return int(self.upload_max_size_mb * 1024 * 1024)

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_hours * 3600.0


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-request config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
