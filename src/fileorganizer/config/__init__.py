"""Configuration: runtime settings and the category mapping."""

from __future__ import annotations

from .mapping import CategoryMapping, load_category_mapping
from .models import (
    LoggingSettings,
    OrganizerSettings,
    OrganizeSettings,
    ScanSettings,
    load_settings,
)

__all__ = [
    "CategoryMapping",
    "LoggingSettings",
    "OrganizeSettings",
    "OrganizerSettings",
    "ScanSettings",
    "load_category_mapping",
    "load_settings",
]
