"""
Tests for the progress monitor and progress service.
"""

import asyncio
import logging

import pytest

from content_transfer.core.exceptions import TransferCancelled
from content_transfer.models.transfer import TransferStatus
from content_transfer.runtime.monitor import ProgressMonitor
from content_transfer.runtime.service import ProgressService


class TestProgressMonitor:
    """Test cases for ProgressMonitor."""

    def test_task_lifecycle(self):
        monitor = ProgressMonitor("job")

        monitor.begin_task("Copy", 10)
        monitor.worked(4)
        monitor.worked(0)
        monitor.sub_task("second half")
        monitor.worked(6)
        monitor.done()

        progress = monitor.progress
        assert progress.task_name == "Copy"
        assert progress.sub_task == "second half"
        assert progress.transferred_units == 10
        assert progress.progress_percentage == 100.0
        assert progress.status == TransferStatus.COMPLETED
        assert progress.end_time is not None

    def test_begin_task_resets_units(self):
        monitor = ProgressMonitor()
        monitor.begin_task("first", 5)
        monitor.worked(5)

        monitor.begin_task("second")

        assert monitor.progress.transferred_units == 0
        assert monitor.progress.total_units == 0
        assert monitor.progress.progress_percentage == 0.0

    def test_callbacks_receive_snapshots(self):
        monitor = ProgressMonitor()
        seen = []
        monitor.add_callback(seen.append)

        monitor.begin_task("Copy", 3)
        monitor.worked(3)

        assert [p.transferred_units for p in seen] == [0, 3]
        seen[0].transferred_units = 99
        assert monitor.progress.transferred_units == 3

    def test_removed_callback_is_not_called(self):
        monitor = ProgressMonitor()
        seen = []
        monitor.add_callback(seen.append)
        monitor.remove_callback(seen.append)

        monitor.worked(1)

        assert seen == []

    def test_failing_callback_is_logged(self, caplog):
        monitor = ProgressMonitor()

        def broken(progress):
            raise ValueError("boom")

        monitor.add_callback(broken)
        with caplog.at_level(logging.WARNING):
            monitor.worked(1)

        assert monitor.progress.transferred_units == 1
        assert "Progress callback failed" in caplog.text

    def test_cancellation(self):
        monitor = ProgressMonitor()
        monitor.check_cancelled()

        monitor.cancel()
        monitor.cancel()

        assert monitor.is_cancelled
        with pytest.raises(TransferCancelled):
            monitor.check_cancelled()


class TestProgressService:
    """Test cases for ProgressService."""

    @pytest.mark.asyncio
    async def test_run_returns_result(self):
        service = ProgressService()

        async def operation(monitor):
            monitor.worked(2)
            return monitor.progress.transferred_units

        assert await service.run(operation, name="count") == 2

    @pytest.mark.asyncio
    async def test_run_uses_given_monitor(self):
        service = ProgressService()
        monitor = ProgressMonitor("given")

        async def operation(received):
            return received

        assert await service.run(operation, monitor=monitor) is monitor

    @pytest.mark.asyncio
    async def test_timeout_cancels_monitor(self):
        service = ProgressService(default_timeout=0.05)
        monitor = ProgressMonitor()

        async def operation(received):
            await asyncio.sleep(10)

        with pytest.raises(asyncio.TimeoutError):
            await service.run(operation, monitor=monitor)

        assert monitor.is_cancelled

    @pytest.mark.asyncio
    async def test_submit_runs_in_background(self):
        service = ProgressService()
        started = asyncio.Event()

        async def operation(monitor):
            started.set()
            return "done"

        task = service.submit(operation, name="background")

        assert service.active_count == 1
        assert service.monitor_for(task) is not None
        results = await service.wait_all()
        assert started.is_set()
        assert results == ["done"]
        assert service.active_count == 0

    @pytest.mark.asyncio
    async def test_cancel_all_signals_monitors(self):
        service = ProgressService()

        async def operation(monitor):
            while not monitor.is_cancelled:
                await asyncio.sleep(0.01)
            return "stopped"

        service.submit(operation, name="first")
        service.submit(operation, name="second")
        await asyncio.sleep(0.02)

        service.cancel_all()

        assert await service.wait_all() == ["stopped", "stopped"]

    @pytest.mark.asyncio
    async def test_background_failure_is_logged(self, caplog):
        service = ProgressService()

        async def operation(monitor):
            raise RuntimeError("exploded")

        service.submit(operation, name="failing")
        with caplog.at_level(logging.ERROR):
            results = await service.wait_all()

        assert isinstance(results[0], RuntimeError)
        assert "failing failed" in caplog.text

    @pytest.mark.asyncio
    async def test_wait_all_without_tasks(self):
        assert await ProgressService().wait_all() == []
