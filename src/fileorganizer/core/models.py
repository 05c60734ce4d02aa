"""
Data models for fileorganizer core operations.

A WorkItem is created once per admitted directory entry and consumed by
exactly one worker. Every WorkItem produces exactly one Outcome: Moved,
Skipped or Failed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union


class OutcomeStatus(str, Enum):
    """Terminal state of a work item."""

    MOVED = "moved"
    SKIPPED = "skipped"
    FAILED = "failed"


class FailureKind(str, Enum):
    """Per-file failure categories."""

    NOT_FOUND = "NotFound"
    ALREADY_EXISTS = "AlreadyExists"
    PERMISSION_DENIED = "PermissionDenied"
    IO_ERROR = "IOError"


@dataclass(frozen=True)
class WorkItem:
    """
    A single file to organize.

    Attributes:
        source_path: File to move
        base_directory: Directory under which category folders are created
    """

    source_path: Path
    base_directory: Path

    @property
    def file_name(self) -> str:
        return self.source_path.name

    def __str__(self) -> str:
        return f"WorkItem: {self.source_path}"


@dataclass(frozen=True)
class Moved:
    """The file was relocated to ``destination``.

    ``cleanup_warning`` is set when a copy succeeded but the source copy
    could not be removed afterwards.
    """

    source: Path
    destination: Path
    category: str
    cleanup_warning: str | None = None

    status = OutcomeStatus.MOVED


@dataclass(frozen=True)
class Skipped:
    """The file was not processed (e.g. cancelled before it started)."""

    source: Path
    reason: str

    status = OutcomeStatus.SKIPPED


@dataclass(frozen=True)
class Failed:
    """The file could not be moved; it stays where it was."""

    source: Path
    error_kind: FailureKind
    detail: str | None = None

    status = OutcomeStatus.FAILED


Outcome = Union[Moved, Skipped, Failed]


@dataclass
class ScanSummary:
    """
    Aggregated result of one scan.

    Attributes:
        source_directory: Directory that was organized
        total: Number of work items submitted
        moved: Items that reached Moved
        skipped: Items that reached Skipped
        failed: Items that reached Failed
        timed_out: Whether the drain deadline expired
        incomplete: Submitted items without an outcome when the summary was taken
        outcomes: All recorded outcomes, in completion order
    """

    source_directory: Path
    total: int = 0
    moved: int = 0
    skipped: int = 0
    failed: int = 0
    timed_out: bool = False
    incomplete: int = 0
    outcomes: list[Outcome] = field(default_factory=list)

    @property
    def processed(self) -> int:
        """Items that reached a terminal outcome."""
        return self.moved + self.skipped + self.failed

    @property
    def failures(self) -> list[Failed]:
        return [o for o in self.outcomes if isinstance(o, Failed)]

    @property
    def has_failures(self) -> bool:
        return self.failed > 0 or self.incomplete > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize the summary for JSON output."""
        return {
            "source_directory": str(self.source_directory),
            "total": self.total,
            "processed": self.processed,
            "moved": self.moved,
            "skipped": self.skipped,
            "failed": self.failed,
            "timed_out": self.timed_out,
            "incomplete": self.incomplete,
            "failures": [
                {
                    "source": str(f.source),
                    "error_kind": f.error_kind.value,
                    "detail": f.detail,
                }
                for f in self.failures
            ],
        }


__all__ = [
    "Failed",
    "FailureKind",
    "Moved",
    "Outcome",
    "OutcomeStatus",
    "ScanSummary",
    "Skipped",
    "WorkItem",
]
