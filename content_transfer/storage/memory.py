"""
In-memory content storages for values whose payload is already loaded.
"""

import io
from typing import BinaryIO, TextIO

from content_transfer.storage.base import ContentKind, ContentStorage, TEXT_ENCODING


class StringContentStorage(ContentStorage):
    """Text payload held as a Python string."""

    def __init__(self, text: str, charset: str = TEXT_ENCODING):
        super().__init__(ContentKind.TEXT, charset)
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def open_stream(self) -> BinaryIO:
        return io.BytesIO(self._text.encode(self.charset))

    def _open_reader(self) -> TextIO:
        return io.StringIO(self._text, newline="")

    def content_length(self) -> int:
        return len(self._text)


class BytesContentStorage(ContentStorage):
    """Binary payload held as bytes."""

    def __init__(self, data: bytes):
        super().__init__(ContentKind.BINARY)
        self._data = bytes(data)

    @property
    def data(self) -> bytes:
        return self._data

    def open_stream(self) -> BinaryIO:
        return io.BytesIO(self._data)

    def _open_reader(self) -> TextIO:
        # unreachable: ContentStorage.open_reader rejects binary storages
        raise NotImplementedError

    def content_length(self) -> int:
        return len(self._data)
