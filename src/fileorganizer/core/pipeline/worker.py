"""Move workers and the pool that owns them.

This module provides the MoveWorker class (a threading.Thread subclass)
and MoveWorkerPool, which consume WorkItems from a shared queue and run
the MoveExecutor on each of them concurrently.
"""

from __future__ import annotations

import logging
import queue
import threading
import time

from fileorganizer.core.executor import MoveExecutor
from fileorganizer.core.models import Failed, FailureKind, Skipped, WorkItem
from fileorganizer.core.pipeline.collector import OutcomeCollector
from fileorganizer.shared.constants import OrganizeDefaults, QueueConfig
from fileorganizer.shared.errors import ErrorCode, ErrorContext, FileOrganizerError
from fileorganizer.shared.logging import log_operation_error

logger = logging.getLogger(__name__)

# Queue marker telling one worker that no more work will arrive
_NO_MORE_WORK = None


class MoveWorker(threading.Thread):
    """Worker thread that executes moves for items taken from the queue.

    Args:
        work_queue: Queue of WorkItems, terminated by one sentinel per worker.
        executor: MoveExecutor shared by all workers.
        collector: OutcomeCollector receiving one outcome per item.
        cancel_event: Once set, items not yet started are skipped.
        worker_id: Identifier used in thread names and logs.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        work_queue: queue.Queue[WorkItem | None],
        executor: MoveExecutor,
        collector: OutcomeCollector,
        cancel_event: threading.Event,
        worker_id: str,
    ) -> None:
        super().__init__(name=f"fileorganizer-{worker_id}")
        self.work_queue = work_queue
        self.executor = executor
        self.collector = collector
        self.cancel_event = cancel_event
        self.worker_id = worker_id

    def run(self) -> None:
        """Main worker loop; ends on the sentinel, or on an empty queue once cancelled."""
        while True:
            try:
                item = self.work_queue.get(timeout=QueueConfig.GET_POLL_INTERVAL)
            except queue.Empty:
                if self.cancel_event.is_set():
                    break
                continue
            try:
                if item is _NO_MORE_WORK:
                    break
                if self.cancel_event.is_set():
                    self.collector.record(Skipped(item.source_path, OrganizeDefaults.CANCELLED_REASON))
                    continue
                self._process_item(item)
            finally:
                self.work_queue.task_done()

    def _process_item(self, item: WorkItem) -> None:
        try:
            outcome = self.executor.execute(item)
        # pylint: disable-next=broad-exception-caught
        except Exception as e:  # noqa: BLE001
            # Unexpected errors fail the item, not the worker
            context = ErrorContext(
                file_path=str(item.source_path),
                operation="execute_move",
                additional_data={"worker_id": self.worker_id, "error_type": type(e).__name__},
            )
            log_operation_error(
                logger,
                FileOrganizerError(
                    ErrorCode.WORKER_POOL_ERROR,
                    f"Unexpected error processing {item.source_path}: {e}",
                    context,
                    original_error=e,
                ),
            )
            outcome = Failed(item.source_path, FailureKind.IO_ERROR, str(e))
        self.collector.record(outcome)


class MoveWorkerPool:
    """Bounded pool of MoveWorker threads.

    Lifecycle: ``start`` once, ``submit`` any number of items, then either
    ``drain`` (no more work, wait with a deadline) or ``cancel``.

    Args:
        num_workers: Number of worker threads.
        executor: MoveExecutor shared by all workers.
        collector: OutcomeCollector for outcomes.
        max_queue_size: Maximum pending items, 0 for unbounded.
    """

    def __init__(
        self,
        num_workers: int,
        executor: MoveExecutor,
        collector: OutcomeCollector,
        max_queue_size: int = QueueConfig.DEFAULT_SIZE,
    ) -> None:
        if num_workers < 1:
            msg = f"num_workers must be positive, got {num_workers}"
            raise ValueError(msg)
        self.num_workers = num_workers
        self.executor = executor
        self.collector = collector
        self.work_queue: queue.Queue[WorkItem | None] = queue.Queue(maxsize=max_queue_size)
        self.cancel_event = threading.Event()
        self.workers: list[MoveWorker] = []
        self._started = False
        self._closed = False

    def start(self) -> None:
        """Start all worker threads."""
        if self._started:
            raise RuntimeError("Worker pool has already been started")

        for i in range(self.num_workers):
            worker = MoveWorker(
                work_queue=self.work_queue,
                executor=self.executor,
                collector=self.collector,
                cancel_event=self.cancel_event,
                worker_id=f"worker_{i}",
            )
            self.workers.append(worker)
            worker.start()

        self._started = True
        logger.debug("Started %d move workers", self.num_workers)

    def submit(self, item: WorkItem) -> bool:
        """Queue one item, blocking while the queue is full.

        Returns:
            False if the pool was cancelled before the item could be queued
        """
        if not self._started or self._closed:
            raise RuntimeError("Worker pool is not accepting work")

        while not self.cancel_event.is_set():
            try:
                self.work_queue.put(item, timeout=QueueConfig.PUT_POLL_INTERVAL)
            except queue.Full:
                continue
            self.collector.mark_submitted()
            return True
        return False

    def drain(self, timeout: float) -> bool:
        """Signal no more work and wait up to ``timeout`` seconds.

        Returns:
            True if every worker finished in time
        """
        if not self._started:
            raise RuntimeError("Worker pool has not been started")

        self._closed = True
        deadline = time.monotonic() + timeout

        for _ in self.workers:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            try:
                self.work_queue.put(_NO_MORE_WORK, timeout=remaining)
            except queue.Full:
                return False

        for worker in self.workers:
            worker.join(timeout=max(deadline - time.monotonic(), 0))
            if worker.is_alive():
                return False
        return True

    def cancel(self) -> None:
        """Ask workers to abandon items that have not started yet.

        Moves already in progress run to completion.
        """
        self.cancel_event.set()
        self._closed = True
        for _ in self.workers:
            try:
                self.work_queue.put_nowait(_NO_MORE_WORK)
            except queue.Full:
                break

    def join(self) -> None:
        """Wait for every worker to exit, letting in-progress moves finish."""
        for worker in self.workers:
            worker.join()

    @property
    def is_cancelled(self) -> bool:
        return self.cancel_event.is_set()
