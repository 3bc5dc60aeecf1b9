"""
Data models for the Content Transfer Assistant.

This module contains the transfer state enums, the content value
capability and the Pydantic settings model.
"""

from content_transfer.models.transfer import (
    TransferStatus,
    TransferDirection,
    TransferErrorKind,
    TransferProgress,
)
from content_transfer.models.content import (
    ContentValue,
    LobContent,
    TEXT_CONTENT_TYPE,
    BINARY_CONTENT_TYPE,
)
from content_transfer.models.config import TransferSettings

__all__ = [
    # Transfer state
    "TransferStatus",
    "TransferDirection",
    "TransferErrorKind",
    "TransferProgress",
    # Content values
    "ContentValue",
    "LobContent",
    "TEXT_CONTENT_TYPE",
    "BINARY_CONTENT_TYPE",
    # Settings
    "TransferSettings",
]
