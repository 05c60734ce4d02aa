"""End-to-end tests for ScanSession and organize_directory."""

from __future__ import annotations

import errno
import logging
import os
import shutil
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

import pytest
from pytest_mock import MockerFixture

from fileorganizer.config.mapping import CategoryMapping
from fileorganizer.core.executor import MoveExecutor
from fileorganizer.core.models import Failed, FailureKind, Moved, WorkItem
from fileorganizer.core.pipeline import ScanSession, organize_directory
from fileorganizer.shared.errors import (
    ErrorCode,
    InfrastructureError,
    InvalidSourceDirectoryError,
    ScanInterruptedError,
)

MakeFiles = Callable[..., list[Path]]


class TestOrganizeDirectory:
    """Whole-run behaviour on a real temporary directory."""

    def test_files_land_in_category_folders(self, source_dir: Path, mapping: CategoryMapping, make_files: MakeFiles) -> None:
        # Given: three files, and Documents/notes.txt already taken
        make_files(source_dir, "report.pdf", "photo.jpg", "notes.txt")
        (source_dir / "Documents").mkdir()
        (source_dir / "Documents" / "notes.txt").write_text("older notes")

        # When
        summary = organize_directory(source_dir, mapping, max_workers=4)

        # Then
        assert summary.total == 3
        assert summary.moved == 3
        assert summary.failed == 0
        assert not summary.has_failures
        assert (source_dir / "Documents" / "report.pdf").read_text() == "report.pdf"
        assert (source_dir / "Images" / "photo.jpg").read_text() == "photo.jpg"
        assert (source_dir / "Documents" / "notes_1.txt").read_text() == "notes.txt"
        assert (source_dir / "Documents" / "notes.txt").read_text() == "older notes"
        assert sorted(p.name for p in source_dir.iterdir()) == ["Documents", "Images"]

    def test_empty_directory(self, source_dir: Path, mapping: CategoryMapping) -> None:
        summary = organize_directory(source_dir, mapping)

        assert summary.total == 0
        assert summary.outcomes == []
        assert list(source_dir.iterdir()) == []

    def test_second_run_has_nothing_to_do(self, source_dir: Path, mapping: CategoryMapping, make_files: MakeFiles) -> None:
        make_files(source_dir, "a.pdf", "b.zip", "c.unknown")
        organize_directory(source_dir, mapping)

        summary = organize_directory(source_dir, mapping)

        assert summary.total == 0
        assert sorted(p.name for p in source_dir.iterdir()) == ["Archives", "Documents", "Others"]

    def test_hidden_files_and_subdirectories_are_left_alone(
        self,
        source_dir: Path,
        mapping: CategoryMapping,
        make_files: MakeFiles,
    ) -> None:
        make_files(source_dir, ".hidden.pdf", "visible.pdf")
        (source_dir / "nested").mkdir()
        make_files(source_dir / "nested", "inner.pdf")

        summary = organize_directory(source_dir, mapping)

        assert summary.total == 1
        assert (source_dir / ".hidden.pdf").exists()
        assert (source_dir / "nested" / "inner.pdf").exists()
        assert (source_dir / "Documents" / "visible.pdf").exists()

    def test_extension_case_is_ignored(self, source_dir: Path, mapping: CategoryMapping, make_files: MakeFiles) -> None:
        make_files(source_dir, "IMG_0001.PNG")

        organize_directory(source_dir, mapping)

        assert (source_dir / "Images" / "IMG_0001.PNG").exists()

    def test_files_without_extension_go_to_default(
        self,
        source_dir: Path,
        mapping: CategoryMapping,
        make_files: MakeFiles,
    ) -> None:
        make_files(source_dir, "Makefile", "draft.")

        summary = organize_directory(source_dir, mapping)

        assert summary.moved == 2
        assert sorted(p.name for p in (source_dir / "Others").iterdir()) == ["Makefile", "draft."]

    def test_permission_failure_is_isolated(
        self,
        source_dir: Path,
        mapping: CategoryMapping,
        make_files: MakeFiles,
        mocker: MockerFixture,
    ) -> None:
        # Given: one file that cannot be moved
        make_files(source_dir, "locked.pdf", "free.pdf", "photo.jpg")
        real_rename = os.rename

        def rename(src: str | Path, dst: str | Path) -> None:
            if Path(src).name == "locked.pdf":
                raise PermissionError(13, "Permission denied", str(src))
            real_rename(src, dst)

        mocker.patch("fileorganizer.core.executor.os.rename", side_effect=rename)

        # When
        summary = organize_directory(source_dir, mapping, max_workers=2)

        # Then: the run completes and the other files still move
        assert summary.total == 3
        assert summary.moved == 2
        assert summary.failed == 1
        assert summary.has_failures
        (failure,) = summary.failures
        assert failure.source == source_dir / "locked.pdf"
        assert failure.error_kind is FailureKind.PERMISSION_DENIED
        assert (source_dir / "locked.pdf").exists()
        assert (source_dir / "Documents" / "free.pdf").exists()

    def test_single_worker(self, source_dir: Path, mapping: CategoryMapping, make_files: MakeFiles) -> None:
        make_files(source_dir, *(f"file_{i}.txt" for i in range(20)))

        summary = organize_directory(source_dir, mapping, max_workers=1)

        assert summary.moved == 20
        assert all(isinstance(o, Moved) for o in summary.outcomes)

    def test_bounded_queue(self, source_dir: Path, mapping: CategoryMapping, make_files: MakeFiles) -> None:
        make_files(source_dir, *(f"clip_{i}.mp4" for i in range(30)))

        summary = organize_directory(source_dir, mapping, max_workers=2, max_queue_size=2)

        assert summary.moved == 30
        assert len(list((source_dir / "Videos").iterdir())) == 30


class TestScanSessionErrors:
    """Fatal errors and lifecycle rules."""

    def test_missing_source_directory(self, tmp_path: Path, mapping: CategoryMapping) -> None:
        with pytest.raises(InvalidSourceDirectoryError) as exc_info:
            ScanSession(tmp_path / "nope", mapping)

        assert exc_info.value.code is ErrorCode.INVALID_SOURCE_DIRECTORY
        assert "does not exist" in exc_info.value.message

    def test_source_is_a_file(self, tmp_path: Path, mapping: CategoryMapping) -> None:
        path = tmp_path / "file.txt"
        path.write_text("x")

        with pytest.raises(InvalidSourceDirectoryError) as exc_info:
            organize_directory(path, mapping)

        assert "not a directory" in exc_info.value.message
        assert exc_info.value.context.additional_data == {"reason": ErrorCode.NOT_A_DIRECTORY.value}

    def test_invalid_source_creates_nothing(self, tmp_path: Path, mapping: CategoryMapping) -> None:
        with pytest.raises(InvalidSourceDirectoryError):
            organize_directory(tmp_path / "missing", mapping)

        assert list(tmp_path.iterdir()) == []

    def test_session_runs_once(self, source_dir: Path, mapping: CategoryMapping) -> None:
        session = ScanSession(source_dir, mapping)
        session.run()

        with pytest.raises(RuntimeError):
            session.run()

    def test_listing_failure(self, source_dir: Path, mapping: CategoryMapping, mocker: MockerFixture) -> None:
        mocker.patch(
            "fileorganizer.core.pipeline.session.os.scandir",
            side_effect=PermissionError(13, "Permission denied"),
        )

        with pytest.raises(InfrastructureError) as exc_info:
            organize_directory(source_dir, mapping)

        assert exc_info.value.code is ErrorCode.SCAN_ENUMERATION_FAILED

    def test_interrupt_carries_partial_summary(
        self,
        source_dir: Path,
        mapping: CategoryMapping,
        make_files: MakeFiles,
        mocker: MockerFixture,
    ) -> None:
        make_files(source_dir, "a.pdf", "b.pdf", "c.pdf")
        mocker.patch(
            "fileorganizer.core.pipeline.session.MoveWorkerPool.drain",
            side_effect=KeyboardInterrupt,
        )

        with pytest.raises(ScanInterruptedError) as exc_info:
            organize_directory(source_dir, mapping)

        error = exc_info.value
        assert error.code is ErrorCode.SCAN_INTERRUPTED
        assert error.summary.total == 3
        assert isinstance(error.__cause__, KeyboardInterrupt)


class TestScanSessionTimeout:
    def test_timeout_reports_incomplete_items(
        self,
        source_dir: Path,
        mapping: CategoryMapping,
        make_files: MakeFiles,
        mocker: MockerFixture,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        # Given: moves that hang until released
        make_files(source_dir, "a.pdf", "b.pdf")
        release = threading.Event()

        def hang(item: WorkItem) -> Failed:
            release.wait(timeout=10)
            return Failed(item.source_path, FailureKind.IO_ERROR, "released")

        mocker.patch.object(MoveExecutor, "execute", side_effect=hang)
        caplog.set_level(logging.WARNING, logger="fileorganizer")

        # When: released only after the deadline has passed
        timer = threading.Timer(0.5, release.set)
        timer.start()
        try:
            summary = organize_directory(source_dir, mapping, max_workers=2, timeout=0.2)
        finally:
            timer.cancel()
            release.set()

        # Then
        assert summary.timed_out
        assert summary.total == 2
        assert summary.incomplete == 2
        assert summary.has_failures
        assert any("did not complete within timeout" in r.getMessage() for r in caplog.records)

    def test_copy_running_at_deadline_completes_before_return(
        self,
        source_dir: Path,
        mapping: CategoryMapping,
        mocker: MockerFixture,
    ) -> None:
        # Given: a cross-device move whose copy outlasts the timeout
        payload = b"x" * 100
        (source_dir / "report.pdf").write_bytes(payload)
        real_copyfileobj = shutil.copyfileobj

        def slow_copy(src: BinaryIO, dst: BinaryIO) -> None:
            dst.write(src.read(5))
            time.sleep(0.5)
            real_copyfileobj(src, dst)

        mocker.patch(
            "fileorganizer.core.executor.os.rename",
            side_effect=OSError(errno.EXDEV, "Invalid cross-device link"),
        )
        mocker.patch("fileorganizer.core.executor.shutil.copyfileobj", side_effect=slow_copy)

        # When
        summary = organize_directory(source_dir, mapping, max_workers=1, timeout=0.1)

        # Then: reported as unfinished, yet the file lives in exactly one place
        assert summary.timed_out
        assert summary.incomplete == 1
        assert not (source_dir / "report.pdf").exists()
        assert (source_dir / "Documents" / "report.pdf").read_bytes() == payload


class TestScanSessionLogging:
    def test_logs_scan_start(
        self,
        source_dir: Path,
        mapping: CategoryMapping,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level(logging.INFO, logger="fileorganizer")

        organize_directory(source_dir, mapping, max_workers=3)

        messages = [r.getMessage() for r in caplog.records]
        assert f"Scanning directory: {source_dir}" in messages
        assert "Thread pool size: 3" in messages
