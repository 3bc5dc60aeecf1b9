"""
Cancellation-aware progress monitor.

A monitor is handed to every long-running step of a transfer. Workers
report progress through it and poll it for cancellation; the caller's
thread (or event loop) may cancel it at any time.
"""

import threading
from datetime import datetime
from typing import Callable, List, Optional
import logging

from content_transfer.core.exceptions import TransferCancelled
from content_transfer.models.transfer import TransferProgress, TransferStatus

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[TransferProgress], None]


class ProgressMonitor:
    """
    Thread-safe progress monitor with cooperative cancellation.

    Progress callbacks receive a snapshot of TransferProgress and run on
    whichever thread reported the progress.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._cancel_event = threading.Event()
        self._lock = threading.Lock()
        self._progress = TransferProgress(task_name=name)
        self._callbacks: List[ProgressCallback] = []

    def add_callback(self, callback: ProgressCallback) -> None:
        """Add a callback function to receive progress updates."""
        with self._lock:
            self._callbacks.append(callback)

    def remove_callback(self, callback: ProgressCallback) -> None:
        """Remove a progress callback function."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @property
    def progress(self) -> TransferProgress:
        with self._lock:
            return self._progress.snapshot()

    def begin_task(self, name: str, total: int = 0) -> None:
        """
        Start a new unit of work.

        Args:
            name: Human readable task name
            total: Total amount of work, 0 when unknown
        """
        self._update_progress(
            task_name=name,
            sub_task=None,
            total_units=max(0, total),
            transferred_units=0,
            status=TransferStatus.RUNNING,
            start_time=datetime.now(),
            end_time=None,
        )

    def sub_task(self, name: str) -> None:
        self._update_progress(sub_task=name)

    def worked(self, amount: int) -> None:
        """Record that ``amount`` units of work were completed."""
        if amount <= 0:
            return
        with self._lock:
            self._progress.transferred_units += amount
        self._notify()

    def done(self, status: TransferStatus = TransferStatus.COMPLETED,
             error_message: Optional[str] = None) -> None:
        """Mark the current task finished."""
        self._update_progress(
            status=status,
            end_time=datetime.now(),
            error_message=error_message,
        )

    def cancel(self) -> None:
        """Request cancellation; workers stop at their next check."""
        if not self._cancel_event.is_set():
            logger.info("Cancellation requested for %s", self.name or "transfer")
            self._cancel_event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def check_cancelled(self) -> None:
        """
        Raise if cancellation was requested.

        Raises:
            TransferCancelled: When cancel() has been called
        """
        if self._cancel_event.is_set():
            raise TransferCancelled()

    def _update_progress(self, **kwargs) -> None:
        with self._lock:
            for key, value in kwargs.items():
                if hasattr(self._progress, key):
                    setattr(self._progress, key, value)
        self._notify()

    def _notify(self) -> None:
        with self._lock:
            callbacks = list(self._callbacks)
            snapshot = self._progress.snapshot()
        for callback in callbacks:
            try:
                callback(snapshot)
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")
