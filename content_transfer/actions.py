"""
Load/save actions for a value editor.

Glue between a value controller, a file chooser and the transfer
orchestrator. Loading is fire-and-forget; saving waits for the export
to finish so its result can be reported.
"""

from pathlib import Path
from typing import Any, Optional, Protocol, Set

from content_transfer.core.error_handler import ErrorHandler
from content_transfer.core.exceptions import TransferInProgressError
from content_transfer.models.content import ContentValue
from content_transfer.runtime.monitor import ProgressMonitor
from content_transfer.runtime.service import ProgressService
from content_transfer.settings.folders import FolderMemory, get_folder_memory
from content_transfer.transfer.base import TransferResult
from content_transfer.transfer.orchestrator import ContentTransferOrchestrator
from content_transfer.utils.helpers import safe_filename
from content_transfer.utils.logging import get_logger

logger = get_logger("actions")


class ValueController(Protocol):
    """Holder of the value being edited."""

    @property
    def value(self) -> Any: ...

    @property
    def value_name(self) -> str: ...

    def update_value(self, value: Any) -> None: ...


class FileChooser(Protocol):
    """Returns validated paths, or None when the user backs out."""

    def choose_open(self, initial_dir: str) -> Optional[Path]: ...

    def choose_save(self, initial_dir: str, file_name: Optional[str]) -> Optional[Path]: ...


class ContentTransferActions:
    """
    Load-from-file and save-to-file for content values.

    Only one transfer may run per value at a time; a second request for
    the same value raises TransferInProgressError.
    """

    def __init__(
        self,
        chooser: FileChooser,
        orchestrator: Optional[ContentTransferOrchestrator] = None,
        service: Optional[ProgressService] = None,
        folders: Optional[FolderMemory] = None,
        error_handler: Optional[ErrorHandler] = None
    ):
        self.chooser = chooser
        self.orchestrator = orchestrator or ContentTransferOrchestrator()
        self.service = service or ProgressService()
        self.folders = folders or get_folder_memory()
        self.error_handler = error_handler or ErrorHandler(get_logger("errors"))
        self._in_flight: Set[int] = set()

    def is_busy(self, value: Any) -> bool:
        return id(value) in self._in_flight

    def _ensure_idle(self, value: ContentValue) -> None:
        if self.is_busy(value):
            raise TransferInProgressError(
                f"A transfer for {value.display_name or 'this value'} is already running"
            )

    def _content_value(self, controller: ValueController) -> Optional[ContentValue]:
        value = controller.value
        if not isinstance(value, ContentValue):
            logger.error(f"Bad content value: {value!r}")
            return None
        return value

    def _report(self, result: TransferResult, value_name: str) -> None:
        report = self.error_handler.build_report(result, value_name)
        if report is not None:
            result.metadata['report'] = report
            logger.error(str(report))

    def load_from_file(self, controller: ValueController) -> bool:
        """
        Ask for a file and load it into the controller's value.

        Must be called from a running event loop. The import runs in the
        background; the controller is updated when it completes.

        Returns:
            True once the import has been started
        """
        value = self._content_value(controller)
        if value is None:
            return False
        self._ensure_idle(value)

        chosen = self.chooser.choose_open(self.folders.get())
        if chosen is None:
            return False
        chosen = Path(chosen)
        self.folders.remember_choice(chosen)

        self._in_flight.add(id(value))

        async def load(monitor: ProgressMonitor) -> TransferResult:
            try:
                result = await self.orchestrator.import_from_file(value, chosen, monitor)
            finally:
                self._in_flight.discard(id(value))
            if result.success:
                controller.update_value(value)
            else:
                self._report(result, controller.value_name)
            return result

        self.service.submit(load, name=f"import {chosen.name}")
        return True

    async def save_to_file(self, controller: ValueController) -> Optional[TransferResult]:
        """
        Ask for a destination and save the controller's value to it.

        Waits for the export to finish. Failures are reported; a cancelled
        export is not.

        Returns:
            The TransferResult, or None when nothing was attempted
        """
        value = self._content_value(controller)
        if value is None:
            return None
        self._ensure_idle(value)

        chosen = self.chooser.choose_save(self.folders.get(), safe_filename(controller.value_name))
        if chosen is None:
            return None
        chosen = Path(chosen)
        self.folders.remember_choice(chosen)

        self._in_flight.add(id(value))
        try:
            result = await self.service.run(
                lambda monitor: self.orchestrator.export_to_file(value, chosen, monitor),
                name=f"export {chosen.name}"
            )
        finally:
            self._in_flight.discard(id(value))

        self._report(result, controller.value_name)
        return result
