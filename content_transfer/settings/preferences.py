"""
Persistent key/value preference store.

Preferences are kept in a single YAML file (TOML when the file name ends
in ``.toml``) and written back on every save.
"""

import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml
import yaml

from content_transfer.utils.logging import get_logger

DEFAULT_PREFERENCES_FILE = Path.home() / ".content-transfer" / "preferences.yaml"

logger = get_logger("settings.preferences")


class PreferenceStore:
    """Flat key/value preferences persisted to a YAML or TOML file."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Initialize the store and load existing preferences.

        Args:
            path: Preferences file. Defaults to ~/.content-transfer/preferences.yaml
        """
        self.path = Path(path) if path else DEFAULT_PREFERENCES_FILE
        self._lock = threading.Lock()
        self._values: Dict[str, Any] = self._load()

    @property
    def is_toml(self) -> bool:
        return self.path.suffix.lower() == '.toml'

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = toml.load(f) if self.is_toml else yaml.safe_load(f)
        except (yaml.YAMLError, toml.TomlDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Corrupt preferences at {self.path}, starting fresh: {e}")
            return {}
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"Preferences at {self.path} are not a mapping, ignoring")
            return {}
        return data

    def get_string(self, key: str, default: str = "") -> str:
        with self._lock:
            value = self._values.get(key)
        return default if value is None else str(value)

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def set_value(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value

    def save(self) -> None:
        """
        Write all preferences to disk.

        Raises:
            OSError: If the file cannot be written
        """
        with self._lock:
            values = dict(self._values)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            if self.is_toml:
                toml.dump(values, f)
            else:
                yaml.safe_dump(values, f, default_flow_style=False)
        logger.debug(f"Saved preferences to {self.path}")

    def reload(self) -> None:
        """Discard in-memory values and re-read the file."""
        values = self._load()
        with self._lock:
            self._values = values
