"""
Request and result types for content transfers.

A transfer either completes (the value or file now holds the new content),
fails with a typed error, or is cancelled. There is no partial success.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from content_transfer.core.exceptions import (
    ContentTransferError,
    StorageOpenError,
    UnsupportedValueError,
)
from content_transfer.models.transfer import (
    TransferDirection,
    TransferErrorKind,
    TransferProgress,
    TransferStatus,
)
from content_transfer.runtime.monitor import ProgressMonitor


@dataclass
class TransferRequest:
    """A single import or export of one value against one file."""
    direction: TransferDirection
    path: Path
    value: Any
    monitor: Optional[ProgressMonitor] = None

    def __post_init__(self):
        self.path = Path(self.path)


@dataclass
class TransferResult:
    """Result of a transfer operation."""
    direction: TransferDirection
    path: Path
    status: TransferStatus
    progress: TransferProgress
    error: Optional[ContentTransferError] = None
    units_transferred: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status == TransferStatus.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.status == TransferStatus.CANCELLED

    @property
    def error_kind(self) -> Optional[TransferErrorKind]:
        """Classify the outcome for callers; None on success."""
        if self.status == TransferStatus.CANCELLED:
            return TransferErrorKind.CANCELLED
        if self.status != TransferStatus.FAILED:
            return None
        if isinstance(self.error, UnsupportedValueError):
            return TransferErrorKind.UNSUPPORTED_VALUE
        if isinstance(self.error, StorageOpenError):
            return TransferErrorKind.STORAGE_OPEN
        return TransferErrorKind.TRANSFER_FAILED

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None
