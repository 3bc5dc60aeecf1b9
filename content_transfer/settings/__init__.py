"""
Persistent user settings: the preference store and folder memory.
"""

from content_transfer.settings.preferences import PreferenceStore, DEFAULT_PREFERENCES_FILE
from content_transfer.settings.folders import (
    DIALOG_FOLDER_PROPERTY,
    FolderMemory,
    get_folder_memory,
    set_folder_memory,
)

__all__ = [
    "PreferenceStore",
    "DEFAULT_PREFERENCES_FILE",
    "DIALOG_FOLDER_PROPERTY",
    "FolderMemory",
    "get_folder_memory",
    "set_folder_memory",
]
