"""
Content storage module for the Content Transfer Assistant.

Storages abstract over where the bytes of a content value live: a file
chosen by the user, or a payload already held in memory.
"""

from .base import ContentKind, ContentStorage, TEXT_ENCODING
from .external import ExternalContentStorage
from .memory import BytesContentStorage, StringContentStorage

__all__ = [
    'ContentKind',
    'ContentStorage',
    'TEXT_ENCODING',
    'ExternalContentStorage',
    'StringContentStorage',
    'BytesContentStorage',
]
