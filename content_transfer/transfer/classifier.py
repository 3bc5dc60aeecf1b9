"""
Content classification: decides whether a value's payload is text.
"""

from typing import Any

from content_transfer.models.content import ContentValue
from content_transfer.storage.base import ContentKind

# Non "text/*" MIME types whose payload is still character data
TEXT_BEARING_TYPES = frozenset({
    "application/json",
    "application/xml",
    "application/xhtml+xml",
    "application/javascript",
})


def _media_type(content_type: Any) -> str:
    if not isinstance(content_type, str):
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_text_content(value: Any) -> bool:
    """
    Check whether a value carries character content.

    Anything that is not a ContentValue with a text-bearing content type
    is treated as binary. Never raises.
    """
    if not isinstance(value, ContentValue):
        return False
    media_type = _media_type(getattr(value, "content_type", None))
    return media_type.startswith("text") or media_type in TEXT_BEARING_TYPES


def classify(value: Any) -> ContentKind:
    """Return the ContentKind governing how ``value`` is transferred."""
    return ContentKind.TEXT if is_text_content(value) else ContentKind.BINARY
