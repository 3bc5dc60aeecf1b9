"""
Content Transfer Assistant

Moves LOB content values (character or binary payloads held by a data
viewer) to and from ordinary files under a cancellable, monitored
operation.
"""

__version__ = "0.1.0"

from content_transfer.models.content import ContentValue, LobContent
from content_transfer.models.transfer import TransferDirection, TransferErrorKind, TransferStatus
from content_transfer.runtime.monitor import ProgressMonitor
from content_transfer.runtime.service import ProgressService
from content_transfer.settings.folders import FolderMemory
from content_transfer.storage.base import ContentKind, TEXT_ENCODING
from content_transfer.transfer.base import TransferRequest, TransferResult
from content_transfer.transfer.classifier import classify, is_text_content
from content_transfer.transfer.orchestrator import ContentTransferOrchestrator

__all__ = [
    "ContentValue",
    "LobContent",
    "TransferDirection",
    "TransferErrorKind",
    "TransferStatus",
    "ProgressMonitor",
    "ProgressService",
    "FolderMemory",
    "ContentKind",
    "TEXT_ENCODING",
    "TransferRequest",
    "TransferResult",
    "classify",
    "is_text_content",
    "ContentTransferOrchestrator",
]
