"""
File-backed content storage.

Wraps a file chosen by the user so that its bytes can be adopted by a
content value, either verbatim or decoded with a fixed charset.
"""

from pathlib import Path
from typing import BinaryIO, Optional, TextIO, Union

from content_transfer.core.exceptions import StorageOpenError
from content_transfer.storage.base import ContentKind, ContentStorage


class ExternalContentStorage(ContentStorage):
    """
    Storage backed by an existing file on disk.

    The file belongs to the user: releasing the storage never deletes it.
    Passing a charset makes this a text storage.
    """

    def __init__(self, path: Union[str, Path], charset: Optional[str] = None):
        kind = ContentKind.TEXT if charset is not None else ContentKind.BINARY
        super().__init__(kind, charset)
        self.path = Path(path)
        self._verify_readable()

    def _verify_readable(self) -> None:
        if not self.path.is_file():
            raise StorageOpenError(
                f"File '{self.path}' does not exist or is not a regular file",
                path=self.path
            )
        try:
            with open(self.path, "rb"):
                pass
        except OSError as e:
            raise StorageOpenError(
                f"Cannot open file '{self.path}' for reading", path=self.path, cause=e
            )

    def open_stream(self) -> BinaryIO:
        try:
            return open(self.path, "rb")
        except OSError as e:
            raise StorageOpenError(
                f"Cannot open file '{self.path}' for reading", path=self.path, cause=e
            )

    def _open_reader(self) -> TextIO:
        try:
            # newline="" keeps line endings exactly as stored
            return open(self.path, "r", encoding=self.charset, newline="")
        except OSError as e:
            raise StorageOpenError(
                f"Cannot open file '{self.path}' for reading", path=self.path, cause=e
            )

    def content_length(self) -> int:
        try:
            return self.path.stat().st_size
        except OSError:
            return 0

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(path='{self.path}', "
            f"kind={self.kind.value}, charset={self.charset})"
        )
