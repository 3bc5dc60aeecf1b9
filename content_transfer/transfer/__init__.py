"""
Content transfer module for the Content Transfer Assistant.

This module classifies content values, streams their payload between
storages and files, and reduces every transfer to a TransferResult.
"""

from .base import TransferRequest, TransferResult
from .classifier import classify, is_text_content
from .orchestrator import ContentTransferOrchestrator
from .streams import copy_binary, copy_text

__all__ = [
    'TransferRequest',
    'TransferResult',
    'classify',
    'is_text_content',
    'ContentTransferOrchestrator',
    'copy_binary',
    'copy_text',
]
