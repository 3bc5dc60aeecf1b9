"""
Logging setup for the Content Transfer Assistant.

This module provides console logging through Rich, optional rotating file
logs, structured JSON output and a per-transfer logger.
"""

import json
import logging
import logging.handlers
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "content_transfer"


class LogLevel(str, Enum):
    """Log levels for structured logging."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogCategory(str, Enum):
    """Categories for structured logging."""
    SYSTEM = "system"
    TRANSFER = "transfer"
    STORAGE = "storage"
    SETTINGS = "settings"
    CLI = "cli"


@dataclass
class LogEntry:
    """Structured log entry with metadata."""
    timestamp: datetime = field(default_factory=datetime.now)
    level: LogLevel = LogLevel.INFO
    category: LogCategory = LogCategory.SYSTEM
    message: str = ""
    operation: Optional[str] = None
    path: Optional[str] = None
    duration: Optional[float] = None
    error_code: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert log entry to dictionary."""
        data = asdict(self)
        data['timestamp'] = self.timestamp.isoformat()
        return data

    def to_json(self) -> str:
        """Convert log entry to JSON string."""
        return json.dumps(self.to_dict(), default=str)


_RESERVED_RECORD_KEYS = frozenset({
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message', 'log_entry',
})


class StructuredFormatter(logging.Formatter):
    """Formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = getattr(record, 'log_entry', None)

        if log_entry and isinstance(log_entry, LogEntry):
            return log_entry.to_json()

        log_entry = LogEntry(
            timestamp=datetime.fromtimestamp(record.created),
            level=LogLevel(record.levelname),
            message=record.getMessage(),
            metadata={
                'logger': record.name,
                'module': record.module,
                'function': record.funcName,
                'line': record.lineno,
            }
        )

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry.metadata[key] = value

        if record.exc_info:
            log_entry.metadata['exception'] = self.formatException(record.exc_info)

        return log_entry.to_json()


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    rich_console: bool = True,
    structured_logging: bool = False,
    log_rotation: bool = True,
    max_log_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> logging.Logger:
    """
    Set up logging configuration for the Content Transfer Assistant.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        rich_console: Whether to use Rich console handler for CLI
        structured_logging: Whether to use structured JSON logging
        log_rotation: Whether to enable log rotation
        max_log_size: Maximum log file size before rotation
        backup_count: Number of backup log files to keep

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    logger.handlers.clear()

    if rich_console and not structured_logging:
        console_handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True
        )
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        if structured_logging:
            console_handler.setFormatter(StructuredFormatter())
        else:
            console_handler.setFormatter(logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))

    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        if log_rotation:
            file_handler: logging.Handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_log_size,
                backupCount=backup_count,
                encoding="utf-8"
            )
        else:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")

        if structured_logging:
            file_handler.setFormatter(StructuredFormatter())
        else:
            file_handler.setFormatter(logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))

        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class TransferLogger:
    """Logger for a single transfer, tagging every record with its operation and path."""

    def __init__(self, operation: str, path: Union[str, Path], structured: bool = False):
        self.operation = operation
        self.path = str(path)
        self.structured = structured
        self.logger = get_logger(f"transfer.{operation}")
        self._started_at: Optional[datetime] = None

    def _log(
        self,
        level: LogLevel,
        message: str,
        error_code: Optional[str] = None,
        exc_info: Optional[BaseException] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        duration = None
        if self._started_at is not None:
            duration = (datetime.now() - self._started_at).total_seconds()
        extra: Dict[str, Any] = {
            'operation': self.operation,
            'transfer_path': self.path,
            **(metadata or {}),
        }
        if self.structured:
            extra['log_entry'] = LogEntry(
                level=level,
                category=LogCategory.TRANSFER,
                message=message,
                operation=self.operation,
                path=self.path,
                duration=duration,
                error_code=error_code,
                metadata=metadata or {},
            )
        self.logger.log(getattr(logging, level.value), message, extra=extra, exc_info=exc_info)

    def started(self, content_kind: str) -> None:
        self._started_at = datetime.now()
        self._log(LogLevel.INFO, f"Starting {self.operation} of {content_kind} content: {self.path}",
                  metadata={'content_kind': content_kind})

    def completed(self, units: int) -> None:
        self._log(LogLevel.INFO, f"Completed {self.operation} of {self.path} ({units} units)",
                  metadata={'units': units})

    def cancelled(self) -> None:
        self._log(LogLevel.INFO, f"Cancelled {self.operation} of {self.path}")

    def failed(self, error: Exception) -> None:
        code = getattr(error, 'code', type(error).__name__)
        self._log(LogLevel.ERROR, f"Failed {self.operation} of {self.path}: {error}",
                  error_code=code, exc_info=getattr(error, 'cause', None))
