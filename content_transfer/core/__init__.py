"""
Core module for the Content Transfer Assistant.

This module contains the exception hierarchy and the error handler
used throughout the application.
"""

from content_transfer.core.exceptions import (
    ContentTransferError,
    ConfigurationError,
    UnsupportedValueError,
    StorageOpenError,
    TransferFailedError,
    TransferInProgressError,
    TransferCancelled,
)

__all__ = [
    "ContentTransferError",
    "ConfigurationError",
    "UnsupportedValueError",
    "StorageOpenError",
    "TransferFailedError",
    "TransferInProgressError",
    "TransferCancelled",
]
