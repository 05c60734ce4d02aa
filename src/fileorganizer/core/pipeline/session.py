"""Scan session: enumerate, dispatch, drain, summarize.

A ScanSession organizes one source directory once. It validates the
directory, lists its direct children a single time, submits every admitted
file to a MoveWorkerPool, then waits for the pool under a deadline.

States: Init -> Enumerating -> Draining -> Done. A failed validation ends
in Init without creating any state; an interrupt ends with
ScanInterruptedError carrying the partial summary.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

from fileorganizer.config.mapping import CategoryMapping
from fileorganizer.core.category import CategoryResolver
from fileorganizer.core.conflict import DirectoryLocks
from fileorganizer.core.executor import MoveExecutor
from fileorganizer.core.models import ScanSummary, WorkItem
from fileorganizer.core.pipeline.collector import OutcomeCollector
from fileorganizer.core.pipeline.worker import MoveWorkerPool
from fileorganizer.core.scan_filter import ScanFilter
from fileorganizer.shared.constants import QueueConfig, Timeout, WorkerConfig
from fileorganizer.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    ScanInterruptedError,
    create_invalid_source_error,
)
from fileorganizer.shared.logging import log_operation_start, log_operation_success

logger = logging.getLogger(__name__)


def validate_source_directory(source_directory: Path) -> Path:
    """Ensure ``source_directory`` exists and is a directory.

    Raises:
        InvalidSourceDirectoryError: If it is missing or not a directory
    """
    if not source_directory.exists():
        raise create_invalid_source_error(source_directory, ErrorCode.DIRECTORY_NOT_FOUND)
    if not source_directory.is_dir():
        raise create_invalid_source_error(source_directory, ErrorCode.NOT_A_DIRECTORY)
    return source_directory


class ScanSession:
    """One organize run over one source directory.

    Args:
        source_directory: Directory whose direct children are organized;
            category folders are created inside it.
        mapping: Immutable extension to category mapping.
        max_workers: Number of concurrent move workers.
        timeout: Seconds to wait for outstanding moves after enumeration.
            Items unfinished at the deadline are reported as incomplete;
            queued ones are cancelled and moves already running still
            complete before ``run`` returns.
        max_queue_size: Maximum pending work items, 0 for unbounded.
        scan_filter: Entry filter, ScanFilter() by default.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        source_directory: Path | str,
        mapping: CategoryMapping,
        *,
        max_workers: int = WorkerConfig.DEFAULT,
        timeout: float = Timeout.SCAN_DRAIN,
        max_queue_size: int = QueueConfig.DEFAULT_SIZE,
        scan_filter: ScanFilter | None = None,
    ) -> None:
        self.source_directory = validate_source_directory(Path(source_directory))
        self.mapping = mapping
        self.max_workers = max_workers
        self.timeout = timeout
        self.max_queue_size = max_queue_size
        self.scan_filter = scan_filter or ScanFilter()
        self._used = False

    def run(self) -> ScanSummary:
        """Organize the source directory and return the summary.

        Raises:
            ScanInterruptedError: If interrupted while enumerating or draining
            InfrastructureError: If the directory cannot be listed
            RuntimeError: If the session was already run
        """
        if self._used:
            raise RuntimeError("ScanSession can only be run once")
        self._used = True

        start_time = time.time()
        log_operation_start(
            logger,
            "scan",
            {"source_directory": str(self.source_directory), "max_workers": self.max_workers},
        )
        logger.info("Scanning directory: %s", self.source_directory)
        logger.info("Thread pool size: %d", self.max_workers)

        collector = OutcomeCollector(self.source_directory)
        executor = MoveExecutor(CategoryResolver(self.mapping), DirectoryLocks())
        pool = MoveWorkerPool(self.max_workers, executor, collector, self.max_queue_size)
        pool.start()

        try:
            self._enumerate(pool)
            finished = pool.drain(self.timeout)
        except KeyboardInterrupt as e:
            pool.cancel()
            pool.join()
            summary = collector.snapshot()
            logger.warning(
                "Scan interrupted: %d of %d items completed",
                summary.processed,
                summary.total,
            )
            raise ScanInterruptedError(
                "Directory scanning interrupted",
                summary,
                ErrorContext(
                    file_path=str(self.source_directory),
                    operation="scan",
                    additional_data={"submitted": summary.total, "completed": summary.processed},
                ),
                original_error=e,
            ) from e
        except BaseException:
            pool.cancel()
            raise

        if not finished:
            pool.cancel()
            summary = collector.snapshot(timed_out=True)
            logger.warning(
                "Some tasks did not complete within timeout period (%d of %d incomplete after %.1fs)",
                summary.incomplete,
                summary.total,
                self.timeout,
            )
            # A move cut off mid-copy would leave the file in two places
            pool.join()
        else:
            summary = collector.snapshot()

        log_operation_success(
            logger,
            "scan",
            (time.time() - start_time) * 1000,
            {
                "total": summary.total,
                "moved": summary.moved,
                "skipped": summary.skipped,
                "failed": summary.failed,
                "timed_out": summary.timed_out,
            },
        )
        return summary

    def _enumerate(self, pool: MoveWorkerPool) -> None:
        """List direct children once and submit every admitted file."""
        try:
            with os.scandir(self.source_directory) as entries:
                for entry in entries:
                    if not self.scan_filter.admit(entry):
                        continue
                    item = WorkItem(source_path=Path(entry.path), base_directory=self.source_directory)
                    if not pool.submit(item):
                        break
        except OSError as e:
            raise InfrastructureError(
                ErrorCode.SCAN_ENUMERATION_FAILED,
                f"Failed to list source directory {self.source_directory}: {e}",
                ErrorContext(file_path=str(self.source_directory), operation="enumerate"),
                original_error=e,
            ) from e


def organize_directory(
    source_directory: Path | str,
    mapping: CategoryMapping,
    *,
    max_workers: int = WorkerConfig.DEFAULT,
    timeout: float = Timeout.SCAN_DRAIN,
    max_queue_size: int = QueueConfig.DEFAULT_SIZE,
) -> ScanSummary:
    """Run a single ScanSession over ``source_directory``.

    Example:
        >>> mapping = load_category_mapping("config.json")
        >>> summary = organize_directory("Downloads", mapping, max_workers=4)
        >>> summary.total
        3
    """
    session = ScanSession(
        source_directory,
        mapping,
        max_workers=max_workers,
        timeout=timeout,
        max_queue_size=max_queue_size,
    )
    return session.run()
