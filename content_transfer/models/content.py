"""
Content value models for the Content Transfer Assistant.

A content value is the object a data viewer holds for a LOB column. Being
an instance of ContentValue is what makes a value transferable.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Union
import logging

from content_transfer.storage.base import TEXT_ENCODING, ContentStorage
from content_transfer.storage.memory import BytesContentStorage, StringContentStorage

if TYPE_CHECKING:
    from content_transfer.runtime.monitor import ProgressMonitor

logger = logging.getLogger(__name__)

TEXT_CONTENT_TYPE = "text/plain"
BINARY_CONTENT_TYPE = "application/octet-stream"

DEFAULT_BUFFER_SIZE = 64 * 1024


class ContentValue(ABC):
    """
    Abstract content-bearing value.

    The value exclusively owns its current storage. Callers must not run
    more than one transfer against the same value at a time.
    """

    def __init__(self, content_type: str, display_name: str = ""):
        self.content_type = content_type
        self.display_name = display_name

    @property
    @abstractmethod
    def storage(self) -> Optional[ContentStorage]:
        """The storage currently attached to this value, None for NULL."""
        pass

    @abstractmethod
    def get_contents(self, monitor: "ProgressMonitor") -> Optional[ContentStorage]:
        """
        Return the storage holding this value's payload.

        May be long running (e.g. fetching a remote LOB) and should poll
        the monitor for cancellation.

        Raises:
            StorageOpenError: If the payload cannot be retrieved
            TransferCancelled: If the monitor was cancelled
        """
        pass

    @abstractmethod
    def update_contents(self, monitor: "ProgressMonitor", storage: ContentStorage) -> None:
        """
        Replace this value's payload with the content of ``storage``.

        Implementations must leave the current storage attached until the
        new content has been read completely.
        """
        pass

    def release(self) -> None:
        storage = self.storage
        if storage is not None:
            storage.release()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.display_name!r}, content_type={self.content_type!r})"


class LobContent(ContentValue):
    """
    Content value holding its payload in memory.

    Built from a str (character LOB), bytes (binary LOB) or an existing
    ContentStorage.
    """

    def __init__(
        self,
        content: Union[str, bytes, bytearray, ContentStorage, None] = None,
        content_type: Optional[str] = None,
        display_name: str = "",
        buffer_size: int = DEFAULT_BUFFER_SIZE
    ):
        if isinstance(content, str):
            storage: Optional[ContentStorage] = StringContentStorage(content)
        elif isinstance(content, (bytes, bytearray)):
            storage = BytesContentStorage(bytes(content))
        elif isinstance(content, ContentStorage) or content is None:
            storage = content
        else:
            raise TypeError(f"Unsupported content payload: {type(content).__name__}")

        if content_type is None:
            if storage is not None and storage.is_text:
                content_type = TEXT_CONTENT_TYPE
            else:
                content_type = BINARY_CONTENT_TYPE

        super().__init__(content_type, display_name)
        self._storage = storage
        self.buffer_size = buffer_size
        self.modified = False

    @property
    def storage(self) -> Optional[ContentStorage]:
        return self._storage

    @property
    def is_null(self) -> bool:
        return self._storage is None

    def get_contents(self, monitor: "ProgressMonitor") -> Optional[ContentStorage]:
        monitor.check_cancelled()
        return self._storage

    def update_contents(self, monitor: "ProgressMonitor", storage: ContentStorage) -> None:
        monitor.begin_task(f"Load content into {self.display_name or 'value'}",
                           storage.content_length())
        if storage.is_text:
            new_storage: ContentStorage = StringContentStorage(
                self._read_text(monitor, storage), charset=storage.charset
            )
        else:
            new_storage = BytesContentStorage(self._read_bytes(monitor, storage))

        # Nothing below may fail: this is the only point the value changes
        previous = self._storage
        self._storage = new_storage
        self.modified = True
        if previous is not None and previous is not storage:
            previous.release()
        logger.debug("Value %r adopted %r", self, new_storage)

    def _read_text(self, monitor: "ProgressMonitor", storage: ContentStorage) -> str:
        chunks: List[str] = []
        with storage.open_reader() as reader:
            while True:
                monitor.check_cancelled()
                chunk = reader.read(self.buffer_size)
                if not chunk:
                    break
                chunks.append(chunk)
                monitor.worked(len(chunk))
        return "".join(chunks)

    def _read_bytes(self, monitor: "ProgressMonitor", storage: ContentStorage) -> bytes:
        buffer = bytearray()
        with storage.open_stream() as stream:
            while True:
                monitor.check_cancelled()
                chunk = stream.read(self.buffer_size)
                if not chunk:
                    break
                buffer.extend(chunk)
                monitor.worked(len(chunk))
        return bytes(buffer)

    def read_text(self) -> Optional[str]:
        """Return the payload as text, None for a NULL value."""
        if self._storage is None:
            return None
        if self._storage.is_text:
            with self._storage.open_reader() as reader:
                return reader.read()
        with self._storage.open_stream() as stream:
            return stream.read().decode(TEXT_ENCODING)

    def read_bytes(self) -> Optional[bytes]:
        """Return the raw payload, None for a NULL value."""
        if self._storage is None:
            return None
        with self._storage.open_stream() as stream:
            return stream.read()
