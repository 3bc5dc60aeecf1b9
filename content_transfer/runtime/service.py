"""
Progress service: runs monitored operations off the caller's flow.

Callers choose the policy per operation: ``run`` waits for the result,
``submit`` fires the operation and returns immediately.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from content_transfer.runtime.monitor import ProgressMonitor

logger = logging.getLogger(__name__)

T = TypeVar('T')

Operation = Callable[[ProgressMonitor], Awaitable[T]]


class ProgressService:
    """
    Host for monitored, cancellable operations.

    Each operation receives its own ProgressMonitor. Submitted tasks are
    referenced by the service until they finish so they cannot be
    garbage collected mid-flight.
    """

    def __init__(self, default_timeout: Optional[float] = None):
        """
        Initialize the progress service.

        Args:
            default_timeout: Timeout in seconds applied when an operation
                does not specify one; None means no timeout
        """
        self.default_timeout = default_timeout
        self._tasks: Dict[asyncio.Task, ProgressMonitor] = {}

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    async def run(
        self,
        operation: Operation,
        name: Optional[str] = None,
        monitor: Optional[ProgressMonitor] = None,
        timeout: Optional[float] = None
    ) -> Any:
        """
        Run an operation and wait for its result.

        Args:
            operation: Callable taking a ProgressMonitor and returning an awaitable
            name: Optional operation name for logging
            monitor: Monitor to use; a new one is created when omitted
            timeout: Optional timeout in seconds

        Returns:
            Whatever the operation returns

        Raises:
            TimeoutError: If the timeout expires (the monitor is cancelled)
        """
        monitor = monitor or ProgressMonitor(name)
        timeout = timeout if timeout is not None else self.default_timeout

        logger.debug("Running operation %s", name or monitor.name or "<unnamed>")
        try:
            if timeout is not None:
                return await asyncio.wait_for(operation(monitor), timeout)
            return await operation(monitor)
        except asyncio.TimeoutError:
            logger.warning(f"Operation {name or monitor.name} timed out after {timeout}s")
            monitor.cancel()
            raise
        except asyncio.CancelledError:
            monitor.cancel()
            raise

    def submit(
        self,
        operation: Operation,
        name: Optional[str] = None,
        monitor: Optional[ProgressMonitor] = None,
        timeout: Optional[float] = None
    ) -> asyncio.Task:
        """
        Start an operation in the background and return immediately.

        Must be called from a running event loop.

        Returns:
            The asyncio Task running the operation
        """
        monitor = monitor or ProgressMonitor(name)
        task = asyncio.create_task(
            self.run(operation, name=name, monitor=monitor, timeout=timeout),
            name=name
        )
        self._tasks[task] = monitor
        task.add_done_callback(self._task_done)
        return task

    def monitor_for(self, task: asyncio.Task) -> Optional[ProgressMonitor]:
        return self._tasks.get(task)

    def cancel_all(self) -> None:
        """Request cancellation of every in-flight operation."""
        for monitor in list(self._tasks.values()):
            monitor.cancel()

    async def wait_all(self) -> List[Any]:
        """Wait for every submitted operation to finish."""
        tasks = list(self._tasks)
        if not tasks:
            return []
        return await asyncio.gather(*tasks, return_exceptions=True)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.pop(task, None)
        if task.cancelled():
            logger.info(f"Background operation {task.get_name()} was cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(
                f"Background operation {task.get_name()} failed: {error}",
                exc_info=error
            )
