"""
CLI Context Management Module

Holds the options shared across the CLI (verbosity, log level, JSON output)
in a pydantic model stored in a ContextVar.
"""

from __future__ import annotations

import contextvars
from enum import Enum

from pydantic import BaseModel, Field


class LogLevel(str, Enum):
    """Log level enumeration for type safety."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CliContext(BaseModel):
    """
    CLI context model for global command-line state.

    Attributes:
        verbose: Verbosity level (0 = normal, 1+ = verbose)
        log_level: Logging level
        json_output: Whether to output in JSON format
    """

    verbose: int = Field(
        default=0,
        ge=0,
        description="Verbosity level (0 = normal, 1+ = verbose)",
    )

    log_level: LogLevel | None = Field(
        default=None,
        description="Logging level; None defers to the settings",
    )

    json_output: bool = Field(
        default=False,
        description="Whether to output in JSON format",
    )

    def is_verbose(self) -> bool:
        return self.verbose > 0

    def get_effective_log_level(self, fallback: str = LogLevel.INFO.value) -> str:
        """
        Log level after applying the verbose override.

        Args:
            fallback: Level used when no level was given on the command line

        Returns:
            "DEBUG" when verbose, the given level, or ``fallback``
        """
        if self.is_verbose():
            return LogLevel.DEBUG.value
        if self.log_level is None:
            return fallback
        return self.log_level.value


cli_context_var: contextvars.ContextVar[CliContext | None] = contextvars.ContextVar(
    "cli_context",
    default=None,
)


def get_cli_context() -> CliContext:
    """
    Get the current CLI context, or a default one if none was set.
    """
    context = cli_context_var.get()
    if context is None:
        return CliContext()
    return context


def set_cli_context(context: CliContext) -> None:
    cli_context_var.set(context)


def clear_cli_context() -> None:
    """Clear the current CLI context."""
    cli_context_var.set(None)
