# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for the middleware, the cache backends and the
transformation engine. Every field may be overridden by keyword for tests
or when embedding the middleware in another application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MEMORY_CACHE = "memory"


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TRANSFORMCACHE_",
        extra="ignore",
    )

    # === Sources ===
    source_root: Path = Path(".")
    url_prefix: str = "/"
    exclude_patterns: str = ""

    # === Cache ===
    cache_path: str = MEMORY_CACHE
    output_extension: str = ".js"
    side_artifact_suffix: str = ".map"
    memory_max_entries: int | None = None
    coalesce_recompute: bool = True

    # === Transformation engine ===
    transform_backend: Literal["babel", "command"] = "babel"
    transform_options: dict[str, Any] = {}
    transform_command: str = ""

    # === Errors ===
    error_mode: Literal["status", "console"] = "status"

    # === Server ===
    host: str = "127.0.0.1"
    port: int = 8000

    # === Logging ===
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("output_extension", "side_artifact_suffix")
    @classmethod
    def validate_suffix(cls, v: str, info) -> str:  # noqa: N805
        """Suffixes must be non-empty and start with a dot."""
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"{info.field_name} must start with '.' (got {v!r})")
        return v

    @field_validator("url_prefix")
    @classmethod
    def validate_url_prefix(cls, v: str) -> str:  # noqa: N805
        """URL_PREFIX is an absolute URL path; stored without trailing slash."""
        if not v.startswith("/"):
            raise ValueError(f"url_prefix must start with '/' (got {v!r})")
        return v.rstrip("/") or "/"

    @field_validator("cache_path")
    @classmethod
    def validate_cache_path(cls, v: str) -> str:  # noqa: N805
        """CACHE_PATH may not be blank."""
        if not v.strip():
            raise ValueError("cache_path must be 'memory' or a directory path")
        return v.strip()

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.transform_backend == "command" and not self.transform_command.strip():
            errors.append(
                "TRANSFORM_BACKEND=command requires TRANSFORM_COMMAND"
            )

        if self.memory_max_entries is not None:
            if self.memory_max_entries < 1:
                errors.append("MEMORY_MAX_ENTRIES must be >= 1")
            elif not self.is_memory_cache:
                errors.append(
                    "MEMORY_MAX_ENTRIES only applies when CACHE_PATH=memory"
                )

        if self.output_extension == self.side_artifact_suffix:
            errors.append(
                "OUTPUT_EXTENSION and SIDE_ARTIFACT_SUFFIX must differ"
            )

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def is_memory_cache(self) -> bool:
        """True when artifacts live in process memory only."""
        return self.cache_path == MEMORY_CACHE

    @property
    def cache_dir(self) -> Path | None:
        """Cache directory for the disk backend, None for memory."""
        if self.is_memory_cache:
            return None
        return Path(self.cache_path).expanduser()

    @property
    def exclude_patterns_list(self) -> list[str]:
        """Parse comma-separated exclusion globs."""
        return [p.strip() for p in self.exclude_patterns.split(",") if p.strip()]

    @property
    def effective_log_level(self) -> str:
        """DEBUG when the debug flag is on, otherwise LOG_LEVEL."""
        return "DEBUG" if self.debug else self.log_level


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or embedding).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
