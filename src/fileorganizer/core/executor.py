"""Move execution for a single work item.

This module provides the MoveExecutor class which categorizes one file,
claims a collision-free destination and moves the file there. Every
failure is translated into a ``Failed`` outcome; nothing raised by the
filesystem escapes ``execute``.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import time
from pathlib import Path

from fileorganizer.core.category import CategoryResolver
from fileorganizer.core.conflict import DirectoryLocks, ExistsCheck, path_exists, resolve_conflict
from fileorganizer.core.models import Failed, FailureKind, Moved, Outcome, WorkItem
from fileorganizer.shared.logging import log_file_operation, log_operation_success

logger = logging.getLogger(__name__)

# rename() errors meaning "these two locations cannot be renamed across"
_CROSS_DEVICE_ERRNOS = frozenset(
    code
    for code in (errno.EXDEV, getattr(errno, "ENOTSUP", None), getattr(errno, "EOPNOTSUPP", None))
    if code is not None
)


class MoveExecutor:
    """Executes the categorize-then-move sequence for one work item.

    Responsibilities:
    - Resolve the category of the file
    - Create the category directory if needed
    - Resolve name conflicts and move, holding the target directory lock
    - Map filesystem errors to outcome values

    Attributes:
        resolver: CategoryResolver used for every item
        locks: Per-directory lock registry shared by all workers
        exists: Existence check used by conflict resolution
    """

    def __init__(
        self,
        resolver: CategoryResolver,
        locks: DirectoryLocks | None = None,
        exists: ExistsCheck = path_exists,
    ) -> None:
        self.resolver = resolver
        self.locks = locks or DirectoryLocks()
        self.exists = exists

    def execute(self, item: WorkItem) -> Outcome:
        """Organize one file.

        Steps:
        1. Resolve the category from the file name
        2. Ensure ``base_directory / category`` exists
        3. Under the directory lock, resolve a free name and move into it

        Args:
            item: The work item to process

        Returns:
            Moved on success, Failed with the mapped error kind otherwise

        Example:
            >>> outcome = executor.execute(WorkItem(Path("in/a.pdf"), Path("in")))
            >>> outcome.destination
            PosixPath('in/Documents/a.pdf')
        """
        start_time = time.time()
        file_name = item.file_name

        try:
            category = self.resolver.resolve(file_name)
            target_dir = item.base_directory / category
            self._ensure_directory(target_dir)

            with self.locks.lock_for(target_dir):
                destination = resolve_conflict(target_dir / file_name, self.exists)
                cleanup_warning = self._move(item.source_path, destination)

        except FileNotFoundError as e:
            return self._failed(item, FailureKind.NOT_FOUND, e)
        except FileExistsError as e:
            return self._failed(item, FailureKind.ALREADY_EXISTS, e)
        except PermissionError as e:
            return self._failed(item, FailureKind.PERMISSION_DENIED, e)
        except OSError as e:
            return self._failed(item, FailureKind.IO_ERROR, e)

        logger.info("Moved: %s -> %s/", file_name, category)
        log_operation_success(
            logger,
            "move_file",
            (time.time() - start_time) * 1000,
            {"source": str(item.source_path), "destination": str(destination)},
        )
        return Moved(
            source=item.source_path,
            destination=destination,
            category=category,
            cleanup_warning=cleanup_warning,
        )

    def _ensure_directory(self, target_dir: Path) -> None:
        """Create ``target_dir`` and missing ancestors.

        Losing a creation race to another worker is fine.

        Raises:
            FileExistsError: If a non-directory occupies the path
            OSError: If creation fails
        """
        try:
            target_dir.mkdir(parents=True)
        except FileExistsError as e:
            if not target_dir.is_dir():
                msg = f"Category directory path is occupied by a file: {target_dir}"
                raise FileExistsError(errno.EEXIST, msg, str(target_dir)) from e
            return
        logger.info("Created directory: %s", target_dir)

    def _move(self, source: Path, destination: Path) -> str | None:
        """Move ``source`` to ``destination``, which must be free.

        Uses an atomic rename, falling back to copy-then-delete when the two
        locations cannot be renamed across.

        Returns:
            A warning message when the source could not be removed after a
            successful copy, None otherwise

        Raises:
            FileExistsError: If the destination appeared after resolution
            OSError: If the move fails
        """
        # rename() silently replaces on POSIX; a path taken since resolution
        # must fail instead
        if self.exists(destination):
            msg = f"Destination claimed after conflict resolution: {destination}"
            raise FileExistsError(errno.EEXIST, msg, str(destination))

        try:
            os.rename(source, destination)
        except OSError as e:
            if e.errno not in _CROSS_DEVICE_ERRNOS:
                raise
            logger.debug("Atomic rename unavailable for %s (%s), copying instead", source, e)
            return self._copy_then_delete(source, destination)

        log_file_operation(logger, "move", str(source), str(destination))
        return None

    def _copy_then_delete(self, source: Path, destination: Path) -> str | None:
        """Copy into an exclusively created destination, then drop the source."""
        created = False
        try:
            with open(source, "rb") as src, open(destination, "xb") as dst:
                created = True
                shutil.copyfileobj(src, dst)
        except OSError:
            if created:
                self._remove_partial_copy(destination)
            raise

        try:
            shutil.copystat(source, destination)
        except OSError as e:
            logger.debug("Could not copy metadata to %s: %s", destination, e)

        log_file_operation(logger, "copy", str(source), str(destination))

        try:
            os.unlink(source)
        except OSError as e:
            warning = f"Copied {source.name} but could not remove the original: {e}"
            logger.warning("Duplicate cleanup failed: %s", warning)
            return warning
        return None

    @staticmethod
    def _remove_partial_copy(destination: Path) -> None:
        try:
            os.unlink(destination)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove partial copy %s: %s", destination, e)

    @staticmethod
    def _failed(item: WorkItem, kind: FailureKind, error: OSError) -> Failed:
        detail = error.strerror or str(error)
        log_file_operation(
            logger,
            "move",
            str(item.source_path),
            success=False,
            error_message=f"{kind.value}: {detail}",
            context={"error_kind": kind.value},
        )
        return Failed(source=item.source_path, error_kind=kind, detail=detail)
