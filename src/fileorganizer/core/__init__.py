"""Core organize logic: categorization, conflict resolution and moves."""

from __future__ import annotations

from .category import CategoryResolver, get_extension, split_extension
from .conflict import DirectoryLocks, resolve_conflict
from .executor import MoveExecutor
from .models import Failed, FailureKind, Moved, Outcome, OutcomeStatus, ScanSummary, Skipped, WorkItem
from .scan_filter import ScanFilter

__all__ = [
    "CategoryResolver",
    "DirectoryLocks",
    "Failed",
    "FailureKind",
    "Moved",
    "MoveExecutor",
    "Outcome",
    "OutcomeStatus",
    "ScanFilter",
    "ScanSummary",
    "Skipped",
    "WorkItem",
    "get_extension",
    "resolve_conflict",
    "split_extension",
]
