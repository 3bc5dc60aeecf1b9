"""
Pytest configuration and fixtures for the Content Transfer Assistant tests.

This module provides content values, a small-buffer orchestrator, an
isolated preference store and fake value-controller/file-chooser
collaborators.
"""

import threading
import time
from pathlib import Path
from typing import Any, List, Optional

import pytest

from content_transfer.models.config import TransferSettings
from content_transfer.models.content import LobContent
from content_transfer.models.transfer import TransferProgress
from content_transfer.runtime.monitor import ProgressMonitor
from content_transfer.settings.folders import FolderMemory
from content_transfer.settings.preferences import PreferenceStore
from content_transfer.transfer.orchestrator import ContentTransferOrchestrator

SMALL_BUFFER = 4


@pytest.fixture
def settings(tmp_path: Path) -> TransferSettings:
    """Settings with a tiny buffer so copies take several chunks."""
    return TransferSettings(
        buffer_size=SMALL_BUFFER,
        preferences_file=str(tmp_path / "prefs" / "preferences.yaml"),
    )


@pytest.fixture
def orchestrator(settings: TransferSettings) -> ContentTransferOrchestrator:
    return ContentTransferOrchestrator(settings)


@pytest.fixture
def text_value() -> LobContent:
    return LobContent("hello\nworld", display_name="NOTES", buffer_size=SMALL_BUFFER)


@pytest.fixture
def binary_value() -> LobContent:
    return LobContent(bytes(range(256)) * 4, display_name="PAYLOAD", buffer_size=SMALL_BUFFER)


@pytest.fixture
def preference_store(settings: TransferSettings) -> PreferenceStore:
    return PreferenceStore(settings.preferences_file)


@pytest.fixture
def folder_memory(preference_store: PreferenceStore) -> FolderMemory:
    return FolderMemory(preference_store)


def cancelling_monitor(after_units: int) -> ProgressMonitor:
    """Monitor that cancels itself once ``after_units`` have been reported."""
    monitor = ProgressMonitor("cancel-test")

    def on_progress(progress: TransferProgress) -> None:
        if progress.transferred_units >= after_units:
            monitor.cancel()

    monitor.add_callback(on_progress)
    return monitor


class SlowContent(LobContent):
    """Value whose load keeps running for a moment after a cancel request."""

    def __init__(self):
        super().__init__(b"before")
        self.entered = threading.Event()
        self.finished = False

    def update_contents(self, monitor, storage):
        self.entered.set()
        for _ in range(1000):
            if monitor.is_cancelled:
                break
            time.sleep(0.005)
        time.sleep(0.05)
        self.finished = True
        monitor.check_cancelled()


class FakeController:
    """Value controller recording updates."""

    def __init__(self, value: Any, value_name: str = "DATA"):
        self._value = value
        self._value_name = value_name
        self.updates: List[Any] = []

    @property
    def value(self) -> Any:
        return self._value

    @property
    def value_name(self) -> str:
        return self._value_name

    def update_value(self, value: Any) -> None:
        self.updates.append(value)


class FakeChooser:
    """File chooser returning preset paths and recording what it was asked."""

    def __init__(self, open_path: Optional[Path] = None, save_path: Optional[Path] = None):
        self.open_path = open_path
        self.save_path = save_path
        self.calls: List[tuple] = []

    def choose_open(self, initial_dir: str) -> Optional[Path]:
        self.calls.append(("open", initial_dir))
        return self.open_path

    def choose_save(self, initial_dir: str, file_name: Optional[str]) -> Optional[Path]:
        self.calls.append(("save", initial_dir, file_name))
        return self.save_path
