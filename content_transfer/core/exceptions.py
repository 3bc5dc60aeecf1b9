"""
Custom exceptions for the Content Transfer Assistant.

This module defines the exception hierarchy used to report why a
content transfer could not be completed.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union


class ContentTransferError(Exception):
    """Base exception class for Content Transfer Assistant errors."""

    retryable: bool = True

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        path: Optional[Union[str, Path]] = None,
        cause: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        self.path = Path(path) if path is not None else None
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class ConfigurationError(ContentTransferError):
    """Raised when there's an error in configuration."""
    pass


class UnsupportedValueError(ContentTransferError):
    """Raised when a value does not carry transferable content."""

    retryable = False


class StorageOpenError(ContentTransferError):
    """Raised when a source or destination storage cannot be opened."""
    pass


class TransferFailedError(ContentTransferError):
    """Raised when content copying fails part way through."""
    pass


class TransferInProgressError(ContentTransferError):
    """Raised when a value already has a transfer in flight."""

    retryable = False


class TransferCancelled(Exception):
    """
    Raised when a transfer is cancelled through its progress monitor.

    Cancellation is a user decision, not a failure, so this does not
    derive from ContentTransferError.
    """

    def __init__(self, message: str = "Transfer cancelled by user"):
        super().__init__(message)
        self.message = message
