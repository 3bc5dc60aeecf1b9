"""
Content transfer orchestration.

Moves the payload of a content value to or from a file under a progress
monitor. Blocking file I/O runs on worker threads; every outcome is
reduced to a TransferResult and no exception escapes except asyncio
cancellation of the awaiting task.
"""

import asyncio
import io
from pathlib import Path
from typing import Any, BinaryIO, Callable, Optional, TextIO, TypeVar, Union

from content_transfer.core.exceptions import (
    ContentTransferError,
    StorageOpenError,
    TransferCancelled,
    TransferFailedError,
    UnsupportedValueError,
)
from content_transfer.models.config import TransferSettings
from content_transfer.models.content import ContentValue
from content_transfer.models.transfer import TransferDirection, TransferStatus
from content_transfer.runtime.monitor import ProgressMonitor
from content_transfer.storage.base import TEXT_ENCODING, ContentKind, ContentStorage
from content_transfer.storage.external import ExternalContentStorage
from content_transfer.storage.memory import BytesContentStorage, StringContentStorage
from content_transfer.transfer.base import TransferRequest, TransferResult
from content_transfer.transfer.classifier import classify
from content_transfer.transfer.streams import copy_binary, copy_text
from content_transfer.utils.logging import TransferLogger, get_logger

T = TypeVar('T')


class ContentTransferOrchestrator:
    """
    Imports files into content values and exports values to files.

    The orchestrator does no locking: callers must not run two transfers
    against the same value concurrently.
    """

    def __init__(self, settings: Optional[TransferSettings] = None):
        self.settings = settings or TransferSettings()
        self.logger = get_logger("transfer.orchestrator")

    async def execute(self, request: TransferRequest) -> TransferResult:
        """Run a transfer request in its direction."""
        if request.direction == TransferDirection.IMPORT:
            return await self.import_from_file(request.value, request.path, request.monitor)
        return await self.export_to_file(request.value, request.path, request.monitor)

    async def import_from_file(
        self,
        value: Any,
        path: Union[str, Path],
        monitor: Optional[ProgressMonitor] = None
    ) -> TransferResult:
        """
        Replace a value's content with the content of a file.

        The value keeps its previous storage unless the whole file was
        read successfully.

        Args:
            value: Target value; must be a ContentValue
            path: File to read
            monitor: Progress monitor; a new one is created when omitted

        Returns:
            TransferResult describing the outcome
        """
        path = Path(path)
        monitor = monitor or ProgressMonitor(f"import {path.name}")
        tlog = TransferLogger(TransferDirection.IMPORT.value, path)

        if not isinstance(value, ContentValue):
            return self._unsupported(TransferDirection.IMPORT, path, value, monitor, tlog)

        kind = classify(value)
        charset = TEXT_ENCODING if kind == ContentKind.TEXT else None
        tlog.started(kind.value)

        def load() -> int:
            storage = ExternalContentStorage(path, charset)
            try:
                value.update_contents(monitor, storage)
            finally:
                storage.release()
            return monitor.progress.transferred_units

        return await self._perform(TransferDirection.IMPORT, path, monitor, tlog, load)

    async def export_to_file(
        self,
        value: Any,
        path: Union[str, Path],
        monitor: Optional[ProgressMonitor] = None
    ) -> TransferResult:
        """
        Save a value's content to a file.

        Text values are written as UTF-8, binary values
        byte for byte. The value itself is never modified.

        Args:
            value: Source value; must be a ContentValue
            path: Destination file; its directory must exist
            monitor: Progress monitor; a new one is created when omitted

        Returns:
            TransferResult describing the outcome
        """
        path = Path(path)
        monitor = monitor or ProgressMonitor(f"export {path.name}")
        tlog = TransferLogger(TransferDirection.EXPORT.value, path)

        if not isinstance(value, ContentValue):
            return self._unsupported(TransferDirection.EXPORT, path, value, monitor, tlog)

        kind = classify(value)
        tlog.started(kind.value)
        write_started = False

        def destination_opened() -> None:
            nonlocal write_started
            write_started = True

        def save() -> int:
            monitor.begin_task(f"Retrieve {value.display_name or 'content'}")
            storage = self._retrieve(value, monitor, kind, path)

            monitor.begin_task(f"Save content to {path.name}", storage.content_length())
            if kind == ContentKind.TEXT:
                with self._open_reader(storage, path) as reader:
                    return copy_text(reader, path, monitor, TEXT_ENCODING,
                                     self.settings.buffer_size, on_open=destination_opened)
            with self._open_stream(storage, path) as stream:
                return copy_binary(stream, path, monitor, self.settings.buffer_size,
                                   on_open=destination_opened)

        result = await self._perform(TransferDirection.EXPORT, path, monitor, tlog, save)
        # only a destination this export opened (and so truncated) counts as partial output
        if not result.success and write_started:
            self._handle_partial_output(path, result)
        return result

    def _retrieve(
        self,
        value: ContentValue,
        monitor: ProgressMonitor,
        kind: ContentKind,
        path: Path
    ) -> ContentStorage:
        try:
            storage = value.get_contents(monitor)
        except (ContentTransferError, TransferCancelled):
            raise
        except Exception as e:
            raise StorageOpenError(
                f"Cannot retrieve content of {value.display_name or 'value'}",
                path=path, cause=e
            )
        if storage is None:
            # NULL value exports as an empty file
            return StringContentStorage("") if kind == ContentKind.TEXT else BytesContentStorage(b"")
        return storage

    def _open_reader(self, storage: ContentStorage, path: Path) -> TextIO:
        if storage.is_text:
            try:
                return storage.open_reader()
            except OSError as e:
                raise StorageOpenError("Cannot open content reader", path=path, cause=e)
        # text-typed value holding raw bytes: decode them with the fixed charset
        stream = self._open_stream(storage, path)
        try:
            return io.TextIOWrapper(stream, encoding=TEXT_ENCODING, newline="")
        except (OSError, ValueError) as e:
            stream.close()
            raise StorageOpenError("Cannot open content reader", path=path, cause=e)

    def _open_stream(self, storage: ContentStorage, path: Path) -> BinaryIO:
        try:
            return storage.open_stream()
        except OSError as e:
            raise StorageOpenError("Cannot open content stream", path=path, cause=e)

    async def _perform(
        self,
        direction: TransferDirection,
        path: Path,
        monitor: ProgressMonitor,
        tlog: TransferLogger,
        work: Callable[[], int]
    ) -> TransferResult:
        error: Optional[ContentTransferError] = None
        units = 0
        try:
            units = await self._run_blocking(monitor, work)
        except TransferCancelled:
            tlog.cancelled()
            return self._result(direction, path, monitor, TransferStatus.CANCELLED)
        except ContentTransferError as e:
            error = e
        except Exception as e:
            verb = "load content from" if direction == TransferDirection.IMPORT else "save content to"
            error = TransferFailedError(f"Failed to {verb} '{path}'", path=path, cause=e)

        if error is not None:
            if error.path is None:
                error.path = path
            tlog.failed(error)
            return self._result(direction, path, monitor, TransferStatus.FAILED, error)

        tlog.completed(units)
        return self._result(direction, path, monitor, TransferStatus.COMPLETED, units=units)

    async def _run_blocking(self, monitor: ProgressMonitor, work: Callable[[], T]) -> T:
        worker = asyncio.ensure_future(asyncio.to_thread(work))
        try:
            return await asyncio.shield(worker)
        except asyncio.CancelledError:
            # the worker thread stops at its next chunk; the value must not
            # change after the caller sees the cancellation
            monitor.cancel()
            await asyncio.wait([worker])
            if not worker.cancelled():
                worker.exception()
            raise

    def _unsupported(
        self,
        direction: TransferDirection,
        path: Path,
        value: Any,
        monitor: ProgressMonitor,
        tlog: TransferLogger
    ) -> TransferResult:
        error = UnsupportedValueError(f"Bad content value: {value!r}", path=path)
        tlog.failed(error)
        return self._result(direction, path, monitor, TransferStatus.FAILED, error)

    def _handle_partial_output(self, path: Path, result: TransferResult) -> None:
        if not self.settings.remove_partial_output:
            self.logger.warning(f"Partial output left at {path} after {result.status.value} export")
            return
        try:
            path.unlink(missing_ok=True)
            result.metadata['partial_output_removed'] = True
            self.logger.info(f"Removed partial output {path}")
        except OSError as e:
            self.logger.warning(f"Failed to remove partial output {path}: {e}")

    def _result(
        self,
        direction: TransferDirection,
        path: Path,
        monitor: ProgressMonitor,
        status: TransferStatus,
        error: Optional[ContentTransferError] = None,
        units: int = 0
    ) -> TransferResult:
        monitor.done(status, error_message=str(error) if error else None)
        return TransferResult(
            direction=direction,
            path=path,
            status=status,
            progress=monitor.progress,
            error=error,
            units_transferred=units,
        )
