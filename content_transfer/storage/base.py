"""
Base classes for content storages.

A storage describes where the bytes of a content value live and how to
open them, either as raw bytes or as decoded characters.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import BinaryIO, Optional, TextIO
import logging

from content_transfer.core.exceptions import StorageOpenError

logger = logging.getLogger(__name__)

TEXT_ENCODING = "utf-8"


class ContentKind(str, Enum):
    """How the payload of a content value is interpreted."""
    TEXT = "text"
    BINARY = "binary"


class ContentStorage(ABC):
    """
    Abstract base class for all content storages.

    Text storages carry a charset used both to decode readers and to
    encode streams; binary storages never carry one.
    """

    def __init__(self, kind: ContentKind, charset: Optional[str] = None):
        if kind == ContentKind.BINARY and charset is not None:
            raise ValueError("Binary storage cannot carry a charset")
        if kind == ContentKind.TEXT and charset is None:
            charset = TEXT_ENCODING
        self.kind = kind
        self.charset = charset
        self._released = False
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def is_text(self) -> bool:
        return self.kind == ContentKind.TEXT

    @property
    def released(self) -> bool:
        return self._released

    @abstractmethod
    def open_stream(self) -> BinaryIO:
        """
        Open the content as raw bytes.

        Returns:
            A binary file-like object the caller must close

        Raises:
            StorageOpenError: If the content cannot be opened
        """
        pass

    def open_reader(self) -> TextIO:
        """
        Open the content as characters decoded with the storage charset.

        Returns:
            A text file-like object the caller must close

        Raises:
            StorageOpenError: If the storage is binary or cannot be opened
        """
        if not self.is_text:
            raise StorageOpenError(
                f"{self.__class__.__name__} holds binary content and has no reader"
            )
        return self._open_reader()

    @abstractmethod
    def _open_reader(self) -> TextIO:
        pass

    @abstractmethod
    def content_length(self) -> int:
        """Return the content length in bytes (characters for in-memory text)."""
        pass

    def release(self) -> None:
        """Release resources held by this storage. Safe to call twice."""
        if not self._released:
            self._released = True
            self.logger.debug("Released %r", self)

    def __enter__(self) -> "ContentStorage":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value}, charset={self.charset})"
