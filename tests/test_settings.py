"""
Tests for preferences, the dialog folder memory and transfer settings.
"""

import logging
from pathlib import Path

import pytest
import toml
import yaml

from content_transfer.core.exceptions import ConfigurationError
from content_transfer.models.config import TransferSettings
from content_transfer.settings.folders import (
    DIALOG_FOLDER_PROPERTY,
    FolderMemory,
    get_folder_memory,
    set_folder_memory,
)
from content_transfer.settings.preferences import PreferenceStore


class TestPreferenceStore:
    """Test cases for PreferenceStore."""

    def test_missing_file_is_empty(self, tmp_path):
        store = PreferenceStore(tmp_path / "absent.yaml")

        assert store.get_string("anything") == ""
        assert store.get_string("anything", "fallback") == "fallback"
        assert not store.contains("anything")

    def test_save_yaml(self, tmp_path):
        path = tmp_path / "nested" / "prefs.yaml"
        store = PreferenceStore(path)

        store.set_value("key", "value")
        store.save()

        assert yaml.safe_load(path.read_text()) == {"key": "value"}

    def test_save_toml(self, tmp_path):
        path = tmp_path / "prefs.toml"
        store = PreferenceStore(path)

        store.set_value("key", "value")
        store.save()

        assert store.is_toml
        assert toml.loads(path.read_text()) == {"key": "value"}

    def test_reload(self, tmp_path):
        path = tmp_path / "prefs.yaml"
        store = PreferenceStore(path)
        path.write_text("key: changed\n")

        store.reload()

        assert store.get_string("key") == "changed"

    def test_corrupt_file_is_ignored(self, tmp_path, caplog):
        path = tmp_path / "prefs.yaml"
        path.write_text("key: [unclosed\n")

        with caplog.at_level(logging.WARNING):
            store = PreferenceStore(path)

        assert store.get_string("key") == ""
        assert "Corrupt preferences" in caplog.text

    def test_non_mapping_file_is_ignored(self, tmp_path):
        path = tmp_path / "prefs.yaml"
        path.write_text("- a\n- b\n")

        assert not PreferenceStore(path).contains("a")

    def test_non_utf8_file_is_ignored(self, tmp_path, caplog):
        path = tmp_path / "prefs.yaml"
        path.write_bytes(b"dialog.default.folder: \xff\xfe\n")

        with caplog.at_level(logging.WARNING):
            store = PreferenceStore(path)

        assert not store.contains(DIALOG_FOLDER_PROPERTY)
        assert "Corrupt preferences" in caplog.text


class TestFolderMemory:
    """Test cases for FolderMemory."""

    def test_defaults_to_home(self, folder_memory):
        assert folder_memory.get() == str(Path.home())

    def test_set_and_get(self, folder_memory, tmp_path):
        folder_memory.set(tmp_path)

        assert folder_memory.get() == str(tmp_path)

    def test_persists_across_instances(self, folder_memory, preference_store, tmp_path):
        folder_memory.set(tmp_path / "docs")

        reopened = FolderMemory(PreferenceStore(preference_store.path))

        assert reopened.get() == str(tmp_path / "docs")

    def test_stores_path_unvalidated(self, folder_memory):
        folder_memory.set("/definitely/not/existing")

        assert folder_memory.get() == "/definitely/not/existing"

    def test_remember_file_choice_keeps_parent(self, folder_memory, tmp_path):
        folder_memory.remember_choice(tmp_path / "exports" / "data.bin")

        assert folder_memory.get() == str(tmp_path / "exports")

    def test_remember_directory_choice(self, folder_memory, tmp_path):
        folder_memory.remember_choice(tmp_path / "exports", is_directory=True)

        assert folder_memory.get() == str(tmp_path / "exports")

    def test_unwritable_store_does_not_raise(self, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        memory = FolderMemory(PreferenceStore(blocker / "prefs.yaml"))

        with caplog.at_level(logging.WARNING):
            memory.set(tmp_path)

        assert memory.get() == str(tmp_path)
        assert "Could not persist dialog folder" in caplog.text

    def test_initialized_from_store(self, tmp_path):
        path = tmp_path / "prefs.yaml"
        path.write_text(yaml.safe_dump({DIALOG_FOLDER_PROPERTY: "/srv/data"}))

        assert FolderMemory(PreferenceStore(path)).get() == "/srv/data"

    def test_non_utf8_store_falls_back_to_home(self, tmp_path):
        path = tmp_path / "prefs.yaml"
        path.write_bytes(b"dialog.default.folder: \xff\xfe\n")

        assert FolderMemory(PreferenceStore(path)).get() == str(Path.home())

    def test_process_wide_memory(self, folder_memory):
        set_folder_memory(folder_memory)
        try:
            assert get_folder_memory() is folder_memory
        finally:
            set_folder_memory(None)


class TestTransferSettings:
    """Test cases for TransferSettings."""

    def test_defaults(self):
        settings = TransferSettings()

        assert settings.buffer_size == 64 * 1024
        assert settings.remove_partial_output is False
        assert settings.log_level == "INFO"

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("buffer_size: 128\nlog_level: debug\n")

        settings = TransferSettings.load(path, environ={})

        assert settings.buffer_size == 128
        assert settings.log_level == "DEBUG"

    def test_load_toml(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text("remove_partial_output = true\n")

        assert TransferSettings.load(path, environ={}).remove_partial_output is True

    def test_empty_file(self, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("")

        assert TransferSettings.load(path, environ={}) == TransferSettings()

    def test_environment_overrides_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("buffer_size: 128\n")

        settings = TransferSettings.load(path, environ={"CONTENT_TRANSFER_BUFFER_SIZE": "256"})

        assert settings.buffer_size == 256

    @pytest.mark.parametrize("content,suffix", [
        (b"buffer_size: 0\n", ".yaml"),
        (b"log_level: loud\n", ".yaml"),
        (b"- not a mapping\n", ".yaml"),
        (b"buffer_size: [1\n", ".yaml"),
        (b"buffer_size: \xff\n", ".yaml"),
        (b"buffer_size = \n", ".toml"),
        (b"log_level = \"\xfe\"\n", ".toml"),
        (b"buffer_size=1\n", ".ini"),
    ])
    def test_invalid_settings(self, tmp_path, content, suffix):
        path = tmp_path / f"settings{suffix}"
        path.write_bytes(content)

        with pytest.raises(ConfigurationError):
            TransferSettings.load(path, environ={})

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            TransferSettings.load(tmp_path / "absent.yaml", environ={})
