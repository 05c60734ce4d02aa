"""
Pytest configuration and shared fixtures for fileorganizer tests.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from fileorganizer.cli.context import clear_cli_context
from fileorganizer.config.mapping import CategoryMapping
from fileorganizer.shared.constants import Application, LogConfig


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo setup_structured_logger so caplog keeps seeing package records."""
    yield
    logger = logging.getLogger(LogConfig.ROOT_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    clear_cli_context()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FILEORGANIZER_* variables from the host out of the tests."""
    for key in list(os.environ):
        if key.startswith(Application.ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Empty source directory to organize."""
    directory = tmp_path / "Downloads"
    directory.mkdir()
    return directory


@pytest.fixture
def mapping() -> CategoryMapping:
    """Small mapping covering the usual categories."""
    return CategoryMapping.from_pairs(
        {
            "pdf": "Documents",
            "txt": "Documents",
            "jpg": "Images",
            "png": "Images",
            "mp4": "Videos",
            "zip": "Archives",
        }
    )


@pytest.fixture
def make_files() -> Callable[..., list[Path]]:
    """Factory creating files in a directory, each containing its own name."""

    def _make(directory: Path, *names: str) -> list[Path]:
        paths = []
        for name in names:
            path = directory / name
            path.write_text(name, encoding="utf-8")
            paths.append(path)
        return paths

    return _make
