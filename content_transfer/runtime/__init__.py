"""
Runtime support: progress monitoring and the background progress service.
"""

from .monitor import ProgressCallback, ProgressMonitor
from .service import ProgressService

__all__ = [
    'ProgressCallback',
    'ProgressMonitor',
    'ProgressService',
]
