"""
Transfer state models for the Content Transfer Assistant.

This module defines the enums and progress structure shared by the
orchestrator, the progress monitor and the caller-facing result types.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class TransferStatus(str, Enum):
    """Status of a transfer operation."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TransferDirection(str, Enum):
    """Which way content moves between a value and a file."""
    IMPORT = "import"  # file -> value
    EXPORT = "export"  # value -> file


class TransferErrorKind(str, Enum):
    """Outcome kinds a caller can branch on."""
    UNSUPPORTED_VALUE = "unsupported_value"
    STORAGE_OPEN = "storage_open"
    TRANSFER_FAILED = "transfer_failed"
    CANCELLED = "cancelled"


@dataclass
class TransferProgress:
    """Progress information for a transfer operation."""
    total_units: int = 0
    transferred_units: int = 0
    task_name: Optional[str] = None
    sub_task: Optional[str] = None
    status: TransferStatus = TransferStatus.PENDING
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    error_message: Optional[str] = None

    @property
    def progress_percentage(self) -> float:
        """Calculate progress percentage; 0 when the total is unknown."""
        if self.total_units <= 0:
            return 0.0
        return min(100.0, (self.transferred_units / self.total_units) * 100.0)

    @property
    def elapsed_time(self) -> Optional[float]:
        """Calculate elapsed time in seconds."""
        if not self.start_time:
            return None
        end_time = self.end_time or datetime.now()
        return (end_time - self.start_time).total_seconds()

    @property
    def transfer_rate(self) -> float:
        """Units per second since the task began."""
        elapsed = self.elapsed_time
        if not elapsed:
            return 0.0
        return self.transferred_units / elapsed

    def snapshot(self) -> "TransferProgress":
        """Return a copy safe to hand to another thread."""
        return replace(self)
