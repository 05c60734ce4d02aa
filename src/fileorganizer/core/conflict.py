"""Name conflict resolution and per-directory locking.

``resolve_conflict`` on its own is a check-then-act sequence over the
filesystem namespace. Callers that move files concurrently hold the lock
returned by ``DirectoryLocks.lock_for(target_dir)`` around both the
resolution and the move into the resolved path.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Callable

from fileorganizer.core.category import split_extension
from fileorganizer.shared.constants import OrganizeDefaults

ExistsCheck = Callable[[Path], bool]


def path_exists(path: Path) -> bool:
    """Existence check that also sees broken symlinks."""
    return os.path.lexists(path)


def resolve_conflict(desired_path: Path, exists: ExistsCheck = path_exists) -> Path:
    """Return a path in the same directory that does not exist yet.

    ``desired_path`` is returned unchanged when free. Otherwise
    ``stem_1.ext``, ``stem_2.ext`` ... are probed in order and the first
    free candidate is returned.

    Args:
        desired_path: Preferred destination path
        exists: Existence check, ``os.path.lexists`` by default

    Returns:
        The first candidate for which ``exists`` returned False
    """
    if not exists(desired_path):
        return desired_path

    stem, extension = split_extension(desired_path.name)
    suffix = f".{extension}" if extension else ""
    parent = desired_path.parent

    counter = 1
    while True:
        candidate = parent / f"{stem}{OrganizeDefaults.CONFLICT_SEPARATOR}{counter}{suffix}"
        if not exists(candidate):
            return candidate
        counter += 1


class DirectoryLocks:
    """Registry of one lock per target directory.

    Workers moving into the same directory serialize on the same lock;
    workers moving into different directories never contend.
    """

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    @staticmethod
    def _key(directory: Path) -> str:
        return os.path.normcase(os.path.abspath(directory))

    def get(self, directory: Path) -> threading.Lock:
        key = self._key(directory)
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def lock_for(self, directory: Path) -> Iterator[None]:
        """Hold the lock of ``directory`` for the duration of the block."""
        with self.get(directory):
            yield

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)
