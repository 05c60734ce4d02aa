"""Thread-safe aggregation of work item outcomes."""

from __future__ import annotations

import threading
from pathlib import Path

from fileorganizer.core.models import Failed, Moved, Outcome, ScanSummary, Skipped


class OutcomeCollector:
    """Counts submitted items and records one outcome per item.

    The dispatcher calls ``mark_submitted`` for every work item it queues;
    workers call ``record`` exactly once per item they take off the queue.
    """

    def __init__(self, source_directory: Path) -> None:
        self._lock = threading.Lock()
        self._source_directory = source_directory
        self._submitted = 0
        self._moved = 0
        self._skipped = 0
        self._failed = 0
        self._outcomes: list[Outcome] = []

    def mark_submitted(self) -> None:
        with self._lock:
            self._submitted += 1

    def record(self, outcome: Outcome) -> None:
        with self._lock:
            self._outcomes.append(outcome)
            if isinstance(outcome, Moved):
                self._moved += 1
            elif isinstance(outcome, Skipped):
                self._skipped += 1
            elif isinstance(outcome, Failed):
                self._failed += 1
            else:
                msg = f"Unknown outcome type: {type(outcome).__name__}"
                raise TypeError(msg)

    @property
    def submitted(self) -> int:
        with self._lock:
            return self._submitted

    @property
    def completed(self) -> int:
        with self._lock:
            return self._moved + self._skipped + self._failed

    def snapshot(self, *, timed_out: bool = False) -> ScanSummary:
        """Summary of everything recorded so far."""
        with self._lock:
            processed = self._moved + self._skipped + self._failed
            return ScanSummary(
                source_directory=self._source_directory,
                total=self._submitted,
                moved=self._moved,
                skipped=self._skipped,
                failed=self._failed,
                timed_out=timed_out,
                incomplete=max(self._submitted - processed, 0),
                outcomes=list(self._outcomes),
            )
