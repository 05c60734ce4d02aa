"""
Structured logging for fileorganizer.

This module sets up the package logger (rich console output for humans,
JSON lines for machines and log files) and provides helpers that attach
operation context to log records.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from fileorganizer.shared.constants import LogConfig
from fileorganizer.shared.errors import ErrorContext, FileOrganizerError


class StructuredFormatter(logging.Formatter):
    """
    Formatter emitting one JSON object per log record.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created,
                tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "error_code"):
            log_entry["error_code"] = record.error_code

        if hasattr(record, "context"):
            log_entry["context"] = record.context

        if hasattr(record, "operation"):
            log_entry["operation"] = record.operation

        if hasattr(record, "duration_ms"):
            log_entry["duration_ms"] = record.duration_ms

        if hasattr(record, "result_info"):
            log_entry["result_info"] = record.result_info

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _create_rich_console() -> Console:
    """
    Create the themed rich Console used by the log handler.
    """
    custom_theme = Theme(
        {
            "logging.level.debug": "cyan",
            "logging.level.info": "green",
            "logging.level.warning": "yellow",
            "logging.level.error": "red bold",
            "logging.level.critical": "red bold reverse",
            "log.time": "dim cyan",
            "log.message": "white",
            "log.path": "dim blue",
        }
    )
    return Console(theme=custom_theme, stderr=True)


def setup_structured_logger(
    name: str = LogConfig.ROOT_LOGGER,
    level: str = LogConfig.DEFAULT_LEVEL,
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        name: Logger name (default: "fileorganizer")
        level: Log level name (default: "INFO")
        log_file: Optional path of a JSON-lines log file
        use_rich_console: Use RichHandler for console output, JSON otherwise

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    # Reconfiguring replaces handlers instead of stacking them
    if logger.handlers:
        for existing in list(logger.handlers):
            existing.close()
        logger.handlers.clear()

    log_level = getattr(logging, level.upper())
    logger.setLevel(log_level)

    if use_rich_console:
        handler: logging.Handler = RichHandler(
            console=_create_rich_console(),
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            log_time_format=LogConfig.TIME_FORMAT,
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
    handler.setLevel(log_level)
    logger.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def _context_to_dict(context: dict[str, Any] | ErrorContext | None) -> dict[str, Any]:
    if context is None:
        return {}
    if isinstance(context, ErrorContext):
        return context.safe_dict()
    return dict(context)


def log_operation_error(
    logger: logging.Logger,
    error: FileOrganizerError,
    operation: str | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """
    Log a FileOrganizerError with its code and context.

    Args:
        logger: Logger instance
        error: The error to log
        operation: Operation name, defaults to the one in the error context
        context: Extra context merged over the error's own context
    """
    context_dict = error.context.safe_dict()
    context_dict.update(_context_to_dict(context))

    logger.error(
        error.message,
        extra={
            "error_code": error.code.name,
            "context": context_dict,
            "operation": operation or error.context.operation,
        },
        exc_info=error.original_error is not None,
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """
    Log successful completion of an operation at DEBUG level.
    """
    logger.debug(
        "Operation '%s' completed successfully",
        operation,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": _context_to_dict(context),
        },
    )


def log_operation_start(
    logger: logging.Logger,
    operation: str,
    context: dict[str, Any] | None = None,
) -> None:
    """
    Log the start of an operation at DEBUG level.
    """
    logger.debug(
        "Starting operation '%s'",
        operation,
        extra={
            "operation": operation,
            "context": context or {},
        },
    )


def log_file_operation(
    logger: logging.Logger,
    operation: str,
    source_path: str,
    destination_path: str | None = None,
    success: bool = True,
    error_message: str | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """
    Log a single file operation.

    Args:
        logger: Logger instance
        operation: Kind of file operation (move, copy, mkdir)
        source_path: Source path
        destination_path: Destination path (optional)
        success: Whether the operation succeeded
        error_message: Error description on failure
        context: Extra context (optional)
    """
    file_context = {
        "operation": operation,
        "source_path": source_path,
    }

    if destination_path:
        file_context["destination_path"] = destination_path
    if context:
        file_context.update(context)

    if success:
        logger.debug(
            "File operation '%s' completed successfully",
            operation,
            extra={
                "operation": "file_operation",
                "context": file_context,
            },
        )
    else:
        logger.error(
            "File operation '%s' failed: %s",
            operation,
            error_message,
            extra={
                "error_code": "FILE_OPERATION_FAILED",
                "operation": "file_operation",
                "context": file_context,
            },
        )
