"""
Last-used folder memory for file and directory choosers.
"""

import threading
from pathlib import Path
from typing import Optional, Union

from content_transfer.settings.preferences import PreferenceStore
from content_transfer.utils.logging import get_logger

DIALOG_FOLDER_PROPERTY = "dialog.default.folder"

logger = get_logger("settings.folders")


class FolderMemory:
    """
    The folder a chooser should open in.

    Initialized from the preference store (the user's home directory when
    unset), read before a chooser opens and updated after it returns.
    Paths are stored as given; validation is the chooser's job.
    """

    def __init__(self, store: PreferenceStore):
        self._store = store
        self._lock = threading.Lock()
        folder = store.get_string(DIALOG_FOLDER_PROPERTY)
        self._folder = folder or str(Path.home())

    def get(self) -> str:
        with self._lock:
            return self._folder

    def set(self, path: Union[str, Path]) -> None:
        """Persist ``path`` and make it the current folder. Never raises."""
        folder = str(path)
        with self._lock:
            self._store.set_value(DIALOG_FOLDER_PROPERTY, folder)
            try:
                self._store.save()
            except OSError as e:
                logger.warning(f"Could not persist dialog folder {folder}: {e}")
            self._folder = folder

    def remember_choice(self, chosen: Union[str, Path], is_directory: bool = False) -> None:
        """Remember the folder of a path a chooser just returned."""
        chosen = Path(chosen)
        self.set(chosen if is_directory else chosen.parent)


_default_memory: Optional[FolderMemory] = None
_default_lock = threading.Lock()


def get_folder_memory() -> FolderMemory:
    """Return the process-wide folder memory, creating it on first use."""
    global _default_memory
    with _default_lock:
        if _default_memory is None:
            _default_memory = FolderMemory(PreferenceStore())
        return _default_memory


def set_folder_memory(memory: Optional[FolderMemory]) -> None:
    """Replace the process-wide folder memory (None resets it)."""
    global _default_memory
    with _default_lock:
        _default_memory = memory
