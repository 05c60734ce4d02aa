"""Allow ``python -m fileorganizer``."""

from fileorganizer.cli.typer_app import app

if __name__ == "__main__":
    app(prog_name="fileorganizer")
