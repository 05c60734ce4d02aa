"""Command-line interface for fileorganizer."""

from __future__ import annotations

from .typer_app import app

__all__ = ["app"]
