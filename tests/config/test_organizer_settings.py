"""Tests for OrganizerSettings and load_settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from fileorganizer.config.models import OrganizerSettings, OrganizeSettings, ScanSettings, load_settings
from fileorganizer.shared.errors import ConfigLoadError, ErrorCode


class TestDefaults:
    def test_default_values(self) -> None:
        settings = OrganizerSettings()

        assert settings.organize.source_directory == "Downloads"
        assert settings.organize.config_file == "config.json"
        assert settings.organize.default_category == "Others"
        assert settings.scan.max_workers == 4
        assert settings.scan.timeout == 60.0
        assert settings.scan.max_queue_size == 0
        assert settings.logging.level == "INFO"
        assert settings.logging.file is None


class TestValidation:
    @pytest.mark.parametrize("workers", [0, 65, -1])
    def test_worker_bounds(self, workers: int) -> None:
        with pytest.raises(ValidationError):
            ScanSettings(max_workers=workers)

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ScanSettings(timeout=0)

    @pytest.mark.parametrize("category", ["a/b", "..", "", "  "])
    def test_default_category_must_be_plain_name(self, category: str) -> None:
        with pytest.raises(ValidationError):
            OrganizeSettings(default_category=category)

    def test_log_level_is_normalized(self) -> None:
        settings = OrganizerSettings(logging={"level": "debug"})

        assert settings.logging.level == "DEBUG"

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OrganizerSettings(logging={"level": "chatty"})


class TestEnvironment:
    def test_nested_environment_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FILEORGANIZER_SCAN__MAX_WORKERS", "8")
        monkeypatch.setenv("FILEORGANIZER_ORGANIZE__DEFAULT_CATEGORY", "Misc")

        settings = load_settings()

        assert settings.scan.max_workers == 8
        assert settings.organize.default_category == "Misc"

    def test_invalid_environment_raises_config_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FILEORGANIZER_SCAN__MAX_WORKERS", "1000")

        with pytest.raises(ConfigLoadError) as exc_info:
            load_settings()

        assert exc_info.value.code is ErrorCode.CONFIG_INVALID


class TestTomlFile:
    def test_partial_file_keeps_other_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.toml"
        path.write_text('[organize]\nsource_directory = "/data/inbox"\n', encoding="utf-8")

        settings = load_settings(path)

        assert settings.organize.source_directory == "/data/inbox"
        assert settings.scan.max_workers == 4

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            OrganizerSettings.from_toml_file(tmp_path / "missing.toml")

        with pytest.raises(ConfigLoadError) as exc_info:
            load_settings(tmp_path / "missing.toml")
        assert exc_info.value.code is ErrorCode.CONFIG_READ_FAILED

    def test_malformed_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.toml"
        path.write_text("[scan\nmax_workers = ", encoding="utf-8")

        with pytest.raises(ConfigLoadError) as exc_info:
            load_settings(path)

        assert exc_info.value.code is ErrorCode.CONFIG_READ_FAILED

    def test_invalid_values(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.toml"
        path.write_text("[scan]\nmax_workers = 0\n", encoding="utf-8")

        with pytest.raises(ConfigLoadError) as exc_info:
            load_settings(path)

        assert exc_info.value.code is ErrorCode.CONFIG_INVALID
