"""Organize command handler.

Loads settings and the category mapping, runs one ScanSession and reports
the summary as rich tables or as a single JSON document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from fileorganizer.cli.context import get_cli_context
from fileorganizer.cli.error_handler import format_json_output, write_json_output
from fileorganizer.config import CategoryMapping, OrganizerSettings, load_category_mapping, load_settings
from fileorganizer.core.models import Failed, Moved, ScanSummary
from fileorganizer.core.pipeline import organize_directory
from fileorganizer.shared.constants import CLIDefaults
from fileorganizer.shared.logging import setup_structured_logger

logger = logging.getLogger(__name__)

COMMAND_NAME = "organize"


@dataclass
class OrganizeOptions:
    """Options given on the command line; None defers to the settings."""

    source: Path | None = None
    config: Path | None = None
    workers: int | None = None
    timeout: float | None = None
    settings_file: Path | None = None


def organize_command(options: OrganizeOptions) -> int:
    """Run the organize command.

    Exceptions are left to the caller, which maps them to exit codes.

    Returns:
        0 when every file was handled, 2 on partial failure
    """
    context = get_cli_context()
    settings = load_settings(options.settings_file)
    setup_structured_logger(
        level=context.get_effective_log_level(settings.logging.level),
        log_file=settings.logging.file,
    )
    logger.debug("Organize options: %s", options)

    console = Console()
    source = options.source or Path(settings.organize.source_directory)
    config_path = options.config or Path(settings.organize.config_file)

    mapping = load_category_mapping(config_path, settings.organize.default_category)
    if not context.json_output:
        console.print("[green]Configuration loaded successfully.[/green]")
        console.print(f"Configured categories: {mapping.count}")

    summary = organize_directory(
        source,
        mapping,
        max_workers=options.workers or settings.scan.max_workers,
        timeout=options.timeout or settings.scan.timeout,
        max_queue_size=settings.scan.max_queue_size,
    )

    if context.json_output:
        write_json_output(
            format_json_output(
                COMMAND_NAME,
                success=not summary.has_failures,
                errors=[_describe_failure(f) for f in summary.failures] or None,
                warnings=_collect_warnings(summary) or None,
                data=collect_organize_data(summary, mapping, settings),
            )
        )
    else:
        display_summary(summary, console)

    if summary.has_failures:
        return CLIDefaults.EXIT_PARTIAL_FAILURE
    return CLIDefaults.EXIT_SUCCESS


def collect_organize_data(
    summary: ScanSummary,
    mapping: CategoryMapping,
    settings: OrganizerSettings,
) -> dict[str, Any]:
    """Build the JSON payload for an organize run."""
    return {
        "summary": summary.to_dict(),
        "configuration": {
            "mapping_file": str(mapping.source_path) if mapping.source_path else None,
            "categories": mapping.count,
            "created_default_file": mapping.created_default_file,
            "used_fallback": mapping.used_fallback,
            "default_category": mapping.default_category,
            "max_queue_size": settings.scan.max_queue_size,
        },
    }


def display_summary(summary: ScanSummary, console: Console) -> None:
    """Display the run summary and any failures in formatted tables.

    Args:
        summary: Result of the scan
        console: Rich console for output
    """
    if summary.total == 0:
        console.print("[yellow]No files to organize.[/yellow]")
        return

    table = Table(title="Organize Summary")
    table.add_column("Total", style="cyan", justify="right")
    table.add_column("Moved", style="green", justify="right")
    table.add_column("Skipped", style="yellow", justify="right")
    table.add_column("Failed", style="red", justify="right")
    table.add_column("Incomplete", style="magenta", justify="right")
    table.add_row(
        str(summary.total),
        str(summary.moved),
        str(summary.skipped),
        str(summary.failed),
        str(summary.incomplete),
    )
    console.print(table)

    if summary.failures:
        failures = Table(title="Failed Files")
        failures.add_column("File", style="cyan")
        failures.add_column("Error", style="red")
        failures.add_column("Detail")
        for failure in summary.failures:
            failures.add_row(failure.source.name, failure.error_kind.value, failure.detail or "-")
        console.print(failures)

    for warning in _collect_warnings(summary):
        console.print(f"[bold yellow]Warning: {warning}[/bold yellow]")


def _describe_failure(failure: Failed) -> str:
    detail = f": {failure.detail}" if failure.detail else ""
    return f"{failure.source.name} ({failure.error_kind.value}){detail}"


def _collect_warnings(summary: ScanSummary) -> list[str]:
    warnings = [
        f"{outcome.source.name}: {outcome.cleanup_warning}"
        for outcome in summary.outcomes
        if isinstance(outcome, Moved) and outcome.cleanup_warning
    ]
    if summary.timed_out:
        warnings.append(f"{summary.incomplete} file(s) did not complete within the timeout")
    return warnings
