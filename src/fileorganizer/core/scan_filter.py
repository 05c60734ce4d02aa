"""Eligibility filter for directory entries.

Only regular, visible files are organized. Any error while inspecting an
entry rejects it.
"""

from __future__ import annotations

import logging
import os
import stat

logger = logging.getLogger(__name__)

# Platform hidden flags; the attributes only exist where the platform has them
_WINDOWS_HIDDEN = getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0)
_BSD_HIDDEN = getattr(stat, "UF_HIDDEN", 0)


def is_hidden(entry: os.DirEntry[str]) -> bool:
    """Whether ``entry`` is hidden by name or by platform flag.

    Raises:
        OSError: If the entry's attributes cannot be read
    """
    if entry.name.startswith("."):
        return True

    st = entry.stat(follow_symlinks=True)
    if _WINDOWS_HIDDEN and getattr(st, "st_file_attributes", 0) & _WINDOWS_HIDDEN:
        return True
    return bool(_BSD_HIDDEN and getattr(st, "st_flags", 0) & _BSD_HIDDEN)


class ScanFilter:
    """Decides which directory entries become work items."""

    def admit(self, entry: os.DirEntry[str]) -> bool:
        try:
            if not entry.is_file(follow_symlinks=True):
                return False
            if is_hidden(entry):
                logger.debug("Skipping hidden file: %s", entry.path)
                return False
        except OSError as e:
            logger.debug("Skipping %s, attributes unavailable: %s", entry.path, e)
            return False
        return True
