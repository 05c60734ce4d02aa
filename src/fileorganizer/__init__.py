"""
fileorganizer - Organize a directory into category folders by extension.

Files in a single source directory are moved concurrently into
subdirectories named after their category, with deterministic renaming
when a destination name is already taken.
"""

__version__ = "0.1.0"

from .config import CategoryMapping, OrganizerSettings, load_category_mapping
from .core import Failed, FailureKind, Moved, ScanSummary, Skipped, WorkItem
from .core.pipeline import ScanSession, organize_directory

__all__ = [
    "CategoryMapping",
    "Failed",
    "FailureKind",
    "Moved",
    "OrganizerSettings",
    "ScanSession",
    "ScanSummary",
    "Skipped",
    "WorkItem",
    "load_category_mapping",
    "organize_directory",
]
