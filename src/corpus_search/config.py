"""Centralized configuration for corpus-search using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_LOG_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})


class Settings(BaseSettings):
    """Typed configuration loaded from environment variables and an optional ``.env`` file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Engine limits
    max_results: int = Field(default=1000, ge=1, description="Maximum results returned by a single search")
    default_page_size: int = Field(default=20, ge=1, description="Page size used by paginated searches")
    suggestion_limit: int = Field(default=10, ge=1, description="Maximum search-bar suggestions")
    history_limit: int = Field(default=10, ge=1, description="Recent searches kept in history")

    # Storage
    corpus_data_dir: Path | None = Field(
        default=None,
        description="Directory holding facts.json, verses.json and narrations.json",
    )
    preferences_path: Path | None = Field(
        default=None,
        description="JSON file persisting presets and history; kept in memory when unset",
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")
    logger_levels: str = Field(
        default="",
        description="Comma-separated per-logger overrides, e.g. 'corpus_search.search=debug'",
    )

    # Telemetry
    service_name: str = Field(default="corpus-search", description="Service name reported to OpenTelemetry")
    tracing_enabled: bool = Field(default=False, description="Install an SDK tracer provider at startup")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().lower()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}")
        return level

    @model_validator(mode="after")
    def _clamp_page_size(self) -> "Settings":
        # A page never holds more than one search can return.
        if self.default_page_size > self.max_results:
            self.default_page_size = self.max_results
        return self

    def get_logger_levels(self) -> dict[str, str]:
        """Parse ``logger_levels`` into a logger name -> level mapping.

        Entries without ``=`` are skipped.
        """
        levels: dict[str, str] = {}
        for entry in self.logger_levels.split(","):
            name, sep, level = entry.partition("=")
            if sep and name.strip() and level.strip():
                levels[name.strip()] = level.strip()
        return levels

    def uses_file_corpora(self) -> bool:
        return self.corpus_data_dir is not None
