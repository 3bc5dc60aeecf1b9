"""
Tests for the load/save value editor actions.
"""

import asyncio
from pathlib import Path

import pytest

from content_transfer.actions import ContentTransferActions
from content_transfer.core.exceptions import TransferInProgressError
from content_transfer.models.content import LobContent
from content_transfer.models.transfer import TransferErrorKind
from content_transfer.runtime.service import ProgressService

from tests.conftest import FakeChooser, FakeController, SlowContent


@pytest.fixture
def chooser():
    return FakeChooser()


@pytest.fixture
def actions(chooser, orchestrator, folder_memory):
    return ContentTransferActions(chooser, orchestrator=orchestrator, folders=folder_memory)


class TestSaveToFile:
    """Test cases for save_to_file."""

    @pytest.mark.asyncio
    async def test_save(self, actions, chooser, folder_memory, text_value, tmp_path):
        chooser.save_path = tmp_path / "out" / "notes.txt"
        chooser.save_path.parent.mkdir()
        controller = FakeController(text_value, value_name="NOTES")

        result = await actions.save_to_file(controller)

        assert result.success
        assert chooser.save_path.read_text() == "hello\nworld"
        assert chooser.calls == [("save", str(Path.home()), "NOTES")]
        assert folder_memory.get() == str(tmp_path / "out")
        assert not actions.is_busy(text_value)

    @pytest.mark.asyncio
    async def test_suggested_name_is_sanitized(self, actions, chooser, text_value):
        await actions.save_to_file(FakeController(text_value, value_name="a/b:c"))

        assert chooser.calls[0][2] == "a_b_c"

    @pytest.mark.asyncio
    async def test_chooser_cancelled(self, actions, chooser, text_value):
        assert await actions.save_to_file(FakeController(text_value)) is None

    @pytest.mark.asyncio
    async def test_not_a_content_value(self, actions, chooser):
        result = await actions.save_to_file(FakeController(12345))

        assert result is None
        assert chooser.calls == []

    @pytest.mark.asyncio
    async def test_failure_is_reported(self, actions, chooser, text_value, tmp_path):
        chooser.save_path = tmp_path / "missing" / "out.txt"

        result = await actions.save_to_file(FakeController(text_value, value_name="NOTES"))

        assert result.error_kind == TransferErrorKind.STORAGE_OPEN
        report = result.metadata['report']
        assert report.title == "Could not save content"
        assert str(chooser.save_path) in report.message


class TestLoadFromFile:
    """Test cases for load_from_file."""

    @pytest.mark.asyncio
    async def test_load(self, actions, chooser, folder_memory, tmp_path):
        chooser.open_path = tmp_path / "in.txt"
        chooser.open_path.write_text("loaded text")
        value = LobContent("", content_type="text/plain")
        controller = FakeController(value)

        started = actions.load_from_file(controller)
        results = await actions.service.wait_all()

        assert started is True
        assert results[0].success
        assert controller.updates == [value]
        assert value.read_text() == "loaded text"
        assert folder_memory.get() == str(tmp_path)
        assert chooser.calls[0][0] == "open"

    @pytest.mark.asyncio
    async def test_failed_load_keeps_value(self, actions, chooser, text_value, tmp_path):
        chooser.open_path = tmp_path / "bad.txt"
        chooser.open_path.write_bytes(b"\xff\xfe")
        controller = FakeController(text_value)

        actions.load_from_file(controller)
        results = await actions.service.wait_all()

        assert results[0].error_kind == TransferErrorKind.TRANSFER_FAILED
        assert results[0].metadata['report'].title == "Could not load content"
        assert controller.updates == []
        assert text_value.read_text() == "hello\nworld"

    @pytest.mark.asyncio
    async def test_not_a_content_value(self, actions, chooser):
        assert actions.load_from_file(FakeController(None)) is False
        assert chooser.calls == []

    @pytest.mark.asyncio
    async def test_chooser_cancelled(self, actions, text_value):
        assert actions.load_from_file(FakeController(text_value)) is False
        assert actions.service.active_count == 0

    @pytest.mark.asyncio
    async def test_second_transfer_on_same_value_is_rejected(self, actions, chooser, text_value, tmp_path):
        chooser.open_path = tmp_path / "in.txt"
        chooser.open_path.write_text("data")
        controller = FakeController(text_value)

        actions.load_from_file(controller)
        assert actions.is_busy(text_value)
        with pytest.raises(TransferInProgressError):
            actions.load_from_file(controller)
        with pytest.raises(TransferInProgressError):
            await actions.save_to_file(controller)

        await actions.service.wait_all()
        assert not actions.is_busy(text_value)

    @pytest.mark.asyncio
    async def test_timed_out_load_holds_value_until_worker_stops(
        self, chooser, orchestrator, folder_memory, tmp_path
    ):
        chooser.open_path = tmp_path / "in.bin"
        chooser.open_path.write_bytes(b"data")
        value = SlowContent()
        controller = FakeController(value)
        actions = ContentTransferActions(
            chooser,
            orchestrator=orchestrator,
            service=ProgressService(default_timeout=0.05),
            folders=folder_memory,
        )

        actions.load_from_file(controller)
        results = await actions.service.wait_all()

        assert isinstance(results[0], asyncio.TimeoutError)
        assert value.finished
        assert not actions.is_busy(value)
        assert controller.updates == []
        assert value.read_bytes() == b"before"
