"""
Command-line interface for the Content Transfer Assistant.
"""

from content_transfer.cli.main import main

__all__ = ["main"]
