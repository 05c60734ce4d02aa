"""
CLI Error Handling Utilities

Maps exceptions that reach the top level to exit codes and reports them
either as a console message or as a JSON document.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from fileorganizer.shared.constants import CLIDefaults
from fileorganizer.shared.errors import (
    CliError,
    ConfigLoadError,
    ErrorCode,
    FileOrganizerError,
    InvalidSourceDirectoryError,
    ScanInterruptedError,
    create_cli_error,
)

logger = logging.getLogger(__name__)


def format_json_output(
    command: str,
    *,
    success: bool,
    errors: list[str] | None = None,
    warnings: list[str] | None = None,
    data: dict[str, Any] | None = None,
) -> bytes:
    """Format command output as JSON.

    Args:
        command: The command that was executed
        success: Whether the operation was successful
        errors: List of error messages
        warnings: List of warning messages
        data: Additional data to include

    Returns:
        JSON-formatted bytes for output
    """
    output: dict[str, Any] = {
        "success": success,
        "command": command,
    }

    if errors:
        output["errors"] = errors

    if warnings:
        output["warnings"] = warnings

    if data:
        output["data"] = data

    return json.dumps(output, indent=2, default=str).encode("utf-8")


def write_json_output(payload: bytes) -> None:
    sys.stdout.buffer.write(payload)
    sys.stdout.buffer.write(b"\n")
    sys.stdout.buffer.flush()


def handle_cli_error(
    error: BaseException,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Handle a fatal CLI error with consistent formatting and logging.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    cli_error = _map_error_to_cli_error(error, command)
    _log_error(error, command, cli_error)
    _output_error(cli_error, error, command, json_output=json_output)
    return cli_error.exit_code


def _map_error_to_cli_error(error: BaseException, command: str) -> CliError:
    """Map specific exception types to CLI errors."""
    if isinstance(error, CliError):
        return error

    if isinstance(error, ConfigLoadError):
        return create_cli_error(
            message=f"Failed to load configuration: {error.message}",
            command=command,
            code=error.code,
            original_error=error,
        )

    if isinstance(error, InvalidSourceDirectoryError):
        return create_cli_error(
            message=error.message,
            command=command,
            code=error.code,
            original_error=error,
        )

    if isinstance(error, (ScanInterruptedError, KeyboardInterrupt)):
        message = "Command interrupted by user"
        if isinstance(error, ScanInterruptedError):
            summary = error.summary
            message += f" ({summary.processed} of {summary.total} files processed)"
        return create_cli_error(
            message=message,
            command=command,
            code=ErrorCode.CLI_COMMAND_INTERRUPTED,
            original_error=error if isinstance(error, Exception) else None,
            exit_code=CLIDefaults.EXIT_INTERRUPTED,
        )

    if isinstance(error, FileOrganizerError):
        return create_cli_error(
            message=error.message,
            command=command,
            code=error.code,
            original_error=error,
        )

    if isinstance(error, OSError):
        return create_cli_error(
            message=f"File system error: {error}",
            command=command,
            original_error=error,
        )

    return create_cli_error(
        message=f"Unexpected error: {error}",
        command=command,
        original_error=error if isinstance(error, Exception) else None,
    )


def _log_error(error: BaseException, command: str, cli_error: CliError) -> None:
    context = {
        "command": command,
        "error_type": type(error).__name__,
        "error_code": cli_error.code.value,
    }
    if isinstance(error, (KeyboardInterrupt, ScanInterruptedError)):
        logger.warning("Command interrupted: %s", cli_error.message, extra={"context": context})
    elif isinstance(error, FileOrganizerError):
        logger.error("%s failed: %s", command, cli_error.message, extra={"context": context})
    else:
        logger.error(
            "Unexpected error in %s: %s",
            command,
            cli_error.message,
            extra={"context": context},
            exc_info=(type(error), error, error.__traceback__),
        )


def _output_error(
    cli_error: CliError,
    error: BaseException,
    command: str,
    *,
    json_output: bool,
) -> None:
    if json_output:
        data: dict[str, Any] = {
            "error_code": cli_error.code.value,
            "error_type": type(error).__name__,
            "exit_code": cli_error.exit_code,
        }
        if isinstance(error, ScanInterruptedError):
            data["summary"] = error.summary.to_dict()
        try:
            write_json_output(
                format_json_output(command, success=False, errors=[cli_error.message], data=data)
            )
        except (OSError, UnicodeEncodeError) as output_error:
            sys.stderr.write(f"Error: {cli_error.message} (JSON output failed: {output_error})\n")
    else:
        sys.stderr.write(f"ERROR: {cli_error.message}\n")
