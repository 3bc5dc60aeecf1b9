"""
Utilities module for the Content Transfer Assistant.
"""

from content_transfer.utils.helpers import (
    calculate_file_checksum,
    format_bytes,
    format_duration,
    safe_filename,
)
from content_transfer.utils.logging import (
    setup_logging,
    get_logger,
    TransferLogger,
)

__all__ = [
    # Helper functions
    "calculate_file_checksum",
    "format_bytes",
    "format_duration",
    "safe_filename",
    # Logging utilities
    "setup_logging",
    "get_logger",
    "TransferLogger",
]
