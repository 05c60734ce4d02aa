"""fileorganizer Error Handling Module

This module defines the error handling system for fileorganizer, providing
structured error classes with context information and user-friendly messages.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved

Fatal errors (configuration, source directory, interruption) are raised as
exceptions. Per-file failures never surface here; they become outcome values
at the move executor boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from fileorganizer.shared.constants import CLIDefaults

if TYPE_CHECKING:
    from fileorganizer.core.models import ScanSummary

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for the fileorganizer application.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # File System Errors
    DIRECTORY_NOT_FOUND = "DIRECTORY_NOT_FOUND"
    NOT_A_DIRECTORY = "NOT_A_DIRECTORY"

    # Configuration Errors
    CONFIG_READ_FAILED = "CONFIG_READ_FAILED"
    CONFIG_WRITE_FAILED = "CONFIG_WRITE_FAILED"
    CONFIG_INVALID = "CONFIG_INVALID"

    # Scan Errors
    INVALID_SOURCE_DIRECTORY = "INVALID_SOURCE_DIRECTORY"
    SCAN_INTERRUPTED = "SCAN_INTERRUPTED"
    SCAN_ENUMERATION_FAILED = "SCAN_ENUMERATION_FAILED"
    WORKER_POOL_ERROR = "WORKER_POOL_ERROR"

    # CLI Errors
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"
    CLI_COMMAND_INTERRUPTED = "CLI_COMMAND_INTERRUPTED"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path and Enum values to primitive types.

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are kept in additional_data
    so the context can always be serialized into a log record.

    Attributes:
        file_path: Optional file path associated with the error
        operation: Optional operation name that caused the error
        additional_data: Optional dict with primitive values only
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is not None:
            object.__setattr__(self, "additional_data", _coerce_primitives(self.additional_data))

    def safe_dict(self) -> dict[str, Any]:
        """Export context as a dict; additional_data is always present."""
        data: dict[str, Any] = {}
        if self.file_path is not None:
            data["file_path"] = self.file_path
        if self.operation is not None:
            data["operation"] = self.operation
        data["additional_data"] = dict(self.additional_data) if self.additional_data else {}
        return data


class FileOrganizerError(Exception):
    """Base exception class for all fileorganizer errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging and JSON output."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class ApplicationError(FileOrganizerError):
    """Application-level errors (configuration, CLI, orchestration)."""


class InfrastructureError(FileOrganizerError):
    """Errors raised while interacting with the filesystem or threads."""


class ConfigLoadError(ApplicationError):
    """The category mapping or settings file could not be loaded.

    Fatal: raised before any scan starts.
    """


class InvalidSourceDirectoryError(InfrastructureError):
    """The source path is missing or is not a directory.

    Fatal: raised before any work item is created.
    """


class ScanInterruptedError(ApplicationError):
    """The scan was interrupted while waiting for workers.

    Attributes:
        summary: Partial ScanSummary at the moment of interruption
    """

    def __init__(
        self,
        message: str,
        summary: ScanSummary,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(ErrorCode.SCAN_INTERRUPTED, message, context, original_error)
        self.summary = summary


class CliError(ApplicationError):
    """CLI-specific error carrying the process exit code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = CLIDefaults.EXIT_ERROR,
    ):
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


def create_config_error(
    message: str,
    config_path: Path | str,
    operation: str,
    code: ErrorCode = ErrorCode.CONFIG_READ_FAILED,
    original_error: Exception | None = None,
) -> ConfigLoadError:
    """Create a configuration load error with context."""
    context = ErrorContext(
        file_path=str(config_path),
        operation=operation,
    )
    return ConfigLoadError(code, message, context, original_error)


def create_invalid_source_error(
    source_path: Path | str,
    code: ErrorCode,
) -> InvalidSourceDirectoryError:
    """Create an invalid source directory error with a descriptive message."""
    if code == ErrorCode.DIRECTORY_NOT_FOUND:
        message = f"Source directory does not exist: {source_path}"
    else:
        message = f"Source path is not a directory: {source_path}"
    context = ErrorContext(
        file_path=str(source_path),
        operation="validate_source_directory",
        additional_data={"reason": code.value},
    )
    return InvalidSourceDirectoryError(ErrorCode.INVALID_SOURCE_DIRECTORY, message, context)


def create_cli_error(
    message: str,
    command: str | None = None,
    code: ErrorCode = ErrorCode.CLI_UNEXPECTED_ERROR,
    original_error: Exception | None = None,
    exit_code: int = CLIDefaults.EXIT_ERROR,
) -> CliError:
    """Create a CLI error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = {"command": command} if command else None
    context = ErrorContext(
        operation="cli",
        additional_data=additional_data,
    )
    return CliError(
        code,
        message,
        context,
        original_error,
        command,
        exit_code,
    )
