"""Concurrent organize pipeline: dispatcher, worker pool and aggregation."""

from __future__ import annotations

from .collector import OutcomeCollector
from .session import ScanSession, organize_directory, validate_source_directory
from .worker import MoveWorker, MoveWorkerPool

__all__ = [
    "MoveWorker",
    "MoveWorkerPool",
    "OutcomeCollector",
    "ScanSession",
    "organize_directory",
    "validate_source_directory",
]
