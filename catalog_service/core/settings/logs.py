"""Logging settings.

Environment variables use LOG_ prefix.
Example: LOG_LEVEL=DEBUG, LOG_JSON=false, LOG_FILE_PATH=logs/catalog.jsonl
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Where catalog logs go and how they are rendered.

    JSON lines are the default so that log shippers can parse cache and
    pagination records (``extra`` fields become top-level keys). Set
    ``LOG_JSON=false`` for a plain text console during development.
    """

    service_name: str = Field(
        default="catalog-service",
        description="Static 'service' field on every JSON record",
    )
    level: LogLevel = Field(default="INFO", description="Root logger level")

    # env_prefix does not apply to aliased fields, so LOG_JSON is spelled out
    json_logs: bool = Field(
        default=True,
        validation_alias=AliasChoices("LOG_JSON", "json_logs"),
        description="Render records as JSON lines instead of plain text",
    )
    console_enabled: bool = Field(default=True, description="Write records to stderr")

    # ──────────────────────────────────────────────────────────────
    # Rotating file output
    # ──────────────────────────────────────────────────────────────

    file_path: Path | None = Field(
        default=None,
        description="Log file path; file output is off when unset",
    )
    file_max_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1024,
        le=1024 * 1024 * 1024,
        description="Rotate the log file once it reaches this size",
    )
    file_backup_count: int = Field(
        default=5,
        ge=0,
        le=100,
        description="Rotated files kept next to the active one",
    )

    capture_warnings: bool = Field(
        default=True,
        description="Send warnings.warn() output through logging",
    )
    include_function_name: bool = Field(
        default=False,
        description="Add the emitting function to JSON records",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``configure_logging``."""
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "console_enabled": self.console_enabled,
            "file_path": str(self.file_path) if self.file_path else None,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "capture_warnings": self.capture_warnings,
            "include_function_name": self.include_function_name,
        }
