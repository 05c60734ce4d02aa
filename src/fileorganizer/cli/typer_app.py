"""
fileorganizer Typer CLI Application

Single-command CLI: organize SOURCE into category folders using the
mapping in CONFIG.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fileorganizer.cli.context import CliContext, LogLevel, clear_cli_context, set_cli_context
from fileorganizer.cli.error_handler import handle_cli_error
from fileorganizer.cli.organize_handler import COMMAND_NAME, OrganizeOptions, organize_command
from fileorganizer.shared.constants import CLIDefaults, CLIHelp, WorkerConfig

# Version information
__version__ = CLIDefaults.VERSION


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
)


@app.command()
def main(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    source: Annotated[
        Path | None,
        typer.Argument(help=CLIHelp.SOURCE_HELP, show_default=False),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Argument(help=CLIHelp.CONFIG_HELP, show_default=False),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-w",
            min=WorkerConfig.MIN,
            max=WorkerConfig.MAX,
            help=CLIHelp.WORKERS_HELP,
        ),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", min=0.001, help=CLIHelp.TIMEOUT_HELP),
    ] = None,
    settings_file: Annotated[
        Path | None,
        typer.Option("--settings", help=CLIHelp.SETTINGS_HELP, dir_okay=False),
    ] = None,
    log_level: Annotated[
        LogLevel | None,
        typer.Option(
            "--log-level",
            case_sensitive=False,
            help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Enable verbose output (equivalent to --log-level DEBUG).",
        ),
    ] = 0,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Enable machine-readable JSON output."),
    ] = False,
    version: Annotated[  # pylint: disable=unused-argument
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version information and exit.",
        ),
    ] = False,
) -> None:
    """Organize the files in SOURCE into category folders by extension."""
    set_cli_context(CliContext(verbose=verbose, log_level=log_level, json_output=json_output))
    options = OrganizeOptions(
        source=source,
        config=config,
        workers=workers,
        timeout=timeout,
        settings_file=settings_file,
    )

    try:
        exit_code = organize_command(options)
    except (Exception, KeyboardInterrupt) as e:  # pylint: disable=broad-exception-caught
        exit_code = handle_cli_error(e, COMMAND_NAME, json_output=json_output)
        raise typer.Exit(exit_code) from e
    finally:
        clear_cli_context()

    if exit_code != CLIDefaults.EXIT_SUCCESS:
        raise typer.Exit(exit_code)


if __name__ == "__main__":
    app()
