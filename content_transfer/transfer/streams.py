"""
Chunked, cancellable copying between content readers/streams and files.

Every loop polls the progress monitor before each chunk, so a cancel
request stops the copy within one buffer.
"""

from pathlib import Path
from typing import BinaryIO, Callable, Optional, TextIO, Union
import logging

from content_transfer.core.exceptions import StorageOpenError, TransferFailedError
from content_transfer.runtime.monitor import ProgressMonitor
from content_transfer.storage.base import TEXT_ENCODING

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 64 * 1024


def copy_reader_to_writer(
    reader: TextIO,
    writer: TextIO,
    monitor: ProgressMonitor,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    path: Optional[Path] = None
) -> int:
    """
    Copy characters until the reader is exhausted.

    Returns:
        Number of characters copied

    Raises:
        TransferCancelled: If the monitor is cancelled between chunks
        TransferFailedError: On read, decode, encode or write failure
    """
    copied = 0
    while True:
        monitor.check_cancelled()
        try:
            chunk = reader.read(buffer_size)
            if not chunk:
                break
            writer.write(chunk)
        except (OSError, UnicodeError) as e:
            raise TransferFailedError(
                f"Failed to copy text content to '{path}'", path=path, cause=e
            )
        copied += len(chunk)
        monitor.worked(len(chunk))
    return copied


def copy_stream_to_stream(
    stream: BinaryIO,
    output: BinaryIO,
    monitor: ProgressMonitor,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    path: Optional[Path] = None
) -> int:
    """
    Copy bytes until the stream is exhausted.

    Returns:
        Number of bytes copied
    """
    copied = 0
    while True:
        monitor.check_cancelled()
        try:
            chunk = stream.read(buffer_size)
            if not chunk:
                break
            output.write(chunk)
        except OSError as e:
            raise TransferFailedError(
                f"Failed to copy binary content to '{path}'", path=path, cause=e
            )
        copied += len(chunk)
        monitor.worked(len(chunk))
    return copied


def _check_destination(path: Path) -> None:
    parent = path.parent
    if not parent.is_dir():
        raise StorageOpenError(
            f"Directory '{parent}' does not exist", path=path
        )


def copy_text(
    reader: TextIO,
    destination: Union[str, Path],
    monitor: ProgressMonitor,
    charset: str = TEXT_ENCODING,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    on_open: Optional[Callable[[], None]] = None
) -> int:
    """
    Save character content to a file encoded with ``charset``.

    Line endings are written exactly as read. ``on_open`` is called once the
    destination has been opened, and so truncated.

    Raises:
        StorageOpenError: If the destination cannot be opened for writing
    """
    path = Path(destination)
    _check_destination(path)
    try:
        output = open(path, "w", encoding=charset, newline="")
    except OSError as e:
        raise StorageOpenError(f"Cannot open file '{path}' for writing", path=path, cause=e)

    with output:
        if on_open is not None:
            on_open()
        copied = copy_reader_to_writer(reader, output, monitor, buffer_size, path)
    logger.debug(f"Wrote {copied} characters to {path} ({charset})")
    return copied


def copy_binary(
    stream: BinaryIO,
    destination: Union[str, Path],
    monitor: ProgressMonitor,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    on_open: Optional[Callable[[], None]] = None
) -> int:
    """
    Save raw bytes to a file without any decoding.

    Raises:
        StorageOpenError: If the destination cannot be opened for writing
    """
    path = Path(destination)
    _check_destination(path)
    try:
        output = open(path, "wb")
    except OSError as e:
        raise StorageOpenError(f"Cannot open file '{path}' for writing", path=path, cause=e)

    with output:
        if on_open is not None:
            on_open()
        copied = copy_stream_to_stream(stream, output, monitor, buffer_size, path)
    logger.debug(f"Wrote {copied} bytes to {path}")
    return copied
