"""fileorganizer Settings Configuration Model.

Main settings facade consolidating the configuration domains (organize,
scan, logging). Values come from defaults, ``FILEORGANIZER_`` environment variables and an
optional TOML file, in increasing priority.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fileorganizer.config.mapping import is_plain_category_name
from fileorganizer.shared.constants import (
    Application,
    LogConfig,
    OrganizeDefaults,
    QueueConfig,
    Timeout,
    WorkerConfig,
)
from fileorganizer.shared.errors import ErrorCode, create_config_error

logger = logging.getLogger(__name__)


class OrganizeSettings(BaseModel):
    """Where files come from and how unknown extensions are categorized."""

    source_directory: str = Field(
        default=OrganizeDefaults.SOURCE_DIRECTORY,
        description="Directory whose direct children are organized",
    )
    config_file: str = Field(
        default=OrganizeDefaults.CONFIG_FILE,
        description="Path of the extension to category mapping file",
    )
    default_category: str = Field(
        default=OrganizeDefaults.DEFAULT_CATEGORY,
        min_length=1,
        description="Category for files with no or unmapped extension",
    )

    @field_validator("default_category")
    @classmethod
    def validate_default_category(cls, v: str) -> str:
        """Category names are single path components."""
        stripped = v.strip()
        if not is_plain_category_name(stripped):
            msg = f"default_category must be a plain directory name, got {v!r}"
            raise ValueError(msg)
        return stripped


class ScanSettings(BaseModel):
    """Configuration for the concurrent move pipeline."""

    max_workers: int = Field(
        default=WorkerConfig.DEFAULT,
        ge=WorkerConfig.MIN,
        le=WorkerConfig.MAX,
        description="Number of worker threads performing moves",
    )
    timeout: float = Field(
        default=Timeout.SCAN_DRAIN,
        gt=0,
        description="Seconds to wait for outstanding work after enumeration",
    )
    max_queue_size: int = Field(
        default=QueueConfig.DEFAULT_SIZE,
        ge=0,
        description="Maximum pending work items (0 = unbounded)",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default=LogConfig.DEFAULT_LEVEL,
        description="Log level name",
    )
    file: str | None = Field(
        default=None,
        description="Optional JSON-lines log file",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept standard level names, case-insensitively."""
        upper = v.upper()
        if upper not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            msg = f"Invalid log level: {v}"
            raise ValueError(msg)
        return upper


class OrganizerSettings(BaseSettings):
    """Settings facade providing unified configuration access."""

    model_config = SettingsConfigDict(
        env_prefix=Application.ENV_PREFIX,
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    organize: OrganizeSettings = Field(default_factory=OrganizeSettings)
    scan: ScanSettings = Field(default_factory=ScanSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> OrganizerSettings:
        """Load settings from a TOML file; unset keys fall back to the environment.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigLoadError: If the file cannot be parsed or fails validation
        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        try:
            raw_config = toml.load(file_path)
        except (OSError, toml.TomlDecodeError) as e:
            raise create_config_error(
                f"Failed to read settings file {file_path}: {e}",
                file_path,
                "load_settings",
                original_error=e,
            ) from e

        try:
            settings = cls(**raw_config)
        except ValidationError as e:
            raise create_config_error(
                f"Invalid settings in {file_path}: {e.error_count()} validation error(s)",
                file_path,
                "validate_settings",
                code=ErrorCode.CONFIG_INVALID,
                original_error=e,
            ) from e

        logger.debug("Loaded settings from %s", file_path)
        return settings


def load_settings(settings_file: str | Path | None = None) -> OrganizerSettings:
    """Build settings from an optional TOML file plus the environment.

    Raises:
        ConfigLoadError: If the settings file is missing, unreadable or invalid
    """
    if settings_file is None:
        try:
            return OrganizerSettings()
        except ValidationError as e:
            raise create_config_error(
                f"Invalid settings in environment: {e.error_count()} validation error(s)",
                Application.ENV_PREFIX,
                "validate_settings",
                code=ErrorCode.CONFIG_INVALID,
                original_error=e,
            ) from e

    try:
        return OrganizerSettings.from_toml_file(settings_file)
    except FileNotFoundError as e:
        raise create_config_error(
            str(e),
            settings_file,
            "load_settings",
            original_error=e,
        ) from e
