"""
Error handling for the Content Transfer Assistant.

This module categorizes transfer errors, attaches recovery strategies and
remediation steps, and turns failed TransferResults into reports fit for
showing to a user.
"""

import logging
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type

from .exceptions import (
    ContentTransferError,
    ConfigurationError,
    UnsupportedValueError,
    StorageOpenError,
    TransferFailedError,
    TransferInProgressError,
)

from content_transfer.models.transfer import TransferDirection

if TYPE_CHECKING:
    from content_transfer.transfer.base import TransferResult


class ErrorCategory(str, Enum):
    """Categories of errors for better handling and reporting."""
    CONFIGURATION = "configuration"
    UNSUPPORTED = "unsupported"
    STORAGE = "storage"
    TRANSFER = "transfer"
    CONCURRENCY = "concurrency"
    UNKNOWN = "unknown"


class ErrorSeverity(str, Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RecoveryStrategy(str, Enum):
    """Available recovery strategies for different error types."""
    RETRY = "retry"
    CHOOSE_ANOTHER_PATH = "choose_another_path"
    MANUAL = "manual"
    ABORT = "abort"


@dataclass
class ErrorContext:
    """Context information for an error occurrence."""
    timestamp: datetime = field(default_factory=datetime.now)
    operation: Optional[str] = None
    path: Optional[Path] = None
    value_name: Optional[str] = None
    additional_data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ErrorInfo:
    """Comprehensive error information."""
    error: Exception
    category: ErrorCategory
    severity: ErrorSeverity
    context: ErrorContext
    recovery_strategies: List[RecoveryStrategy]
    remediation_steps: List[str]
    traceback_str: str
    is_recoverable: bool = True


@dataclass
class FailureReport:
    """What a caller shows the user when a transfer fails."""
    title: str
    message: str
    path: Optional[Path]
    cause: Optional[str]
    error_info: ErrorInfo

    def __str__(self) -> str:
        if self.cause:
            return f"{self.title}: {self.message} ({self.cause})"
        return f"{self.title}: {self.message}"


class ErrorHandler:
    """
    Error handler with categorization, recovery strategies and user reports.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._error_mappings = self._build_error_mappings()
        self._recovery_strategies = self._build_recovery_strategies()
        self._remediation_guides = self._build_remediation_guides()

    def _build_error_mappings(self) -> Dict[Type[Exception], Dict[str, Any]]:
        """Build mapping of exception types to error categories and severities."""
        return {
            ConfigurationError: {
                "category": ErrorCategory.CONFIGURATION,
                "severity": ErrorSeverity.HIGH,
                "recoverable": True,
            },
            UnsupportedValueError: {
                "category": ErrorCategory.UNSUPPORTED,
                "severity": ErrorSeverity.MEDIUM,
                "recoverable": False,
            },
            StorageOpenError: {
                "category": ErrorCategory.STORAGE,
                "severity": ErrorSeverity.MEDIUM,
                "recoverable": True,
            },
            TransferFailedError: {
                "category": ErrorCategory.TRANSFER,
                "severity": ErrorSeverity.HIGH,
                "recoverable": True,
            },
            TransferInProgressError: {
                "category": ErrorCategory.CONCURRENCY,
                "severity": ErrorSeverity.LOW,
                "recoverable": False,
            },
            # Standard Python exceptions
            FileNotFoundError: {
                "category": ErrorCategory.STORAGE,
                "severity": ErrorSeverity.MEDIUM,
                "recoverable": True,
            },
            PermissionError: {
                "category": ErrorCategory.STORAGE,
                "severity": ErrorSeverity.HIGH,
                "recoverable": True,
            },
            UnicodeError: {
                "category": ErrorCategory.TRANSFER,
                "severity": ErrorSeverity.MEDIUM,
                "recoverable": False,
            },
            OSError: {
                "category": ErrorCategory.TRANSFER,
                "severity": ErrorSeverity.HIGH,
                "recoverable": True,
            },
        }

    def _build_recovery_strategies(self) -> Dict[ErrorCategory, List[RecoveryStrategy]]:
        """Build recovery strategies for each error category."""
        return {
            ErrorCategory.CONFIGURATION: [RecoveryStrategy.MANUAL, RecoveryStrategy.ABORT],
            ErrorCategory.UNSUPPORTED: [RecoveryStrategy.ABORT],
            ErrorCategory.STORAGE: [RecoveryStrategy.CHOOSE_ANOTHER_PATH, RecoveryStrategy.MANUAL],
            ErrorCategory.TRANSFER: [RecoveryStrategy.RETRY, RecoveryStrategy.CHOOSE_ANOTHER_PATH],
            ErrorCategory.CONCURRENCY: [RecoveryStrategy.RETRY],
            ErrorCategory.UNKNOWN: [RecoveryStrategy.MANUAL, RecoveryStrategy.ABORT],
        }

    def _build_remediation_guides(self) -> Dict[ErrorCategory, List[str]]:
        """Build remediation guides for each error category."""
        return {
            ErrorCategory.CONFIGURATION: [
                "Check configuration file syntax and required fields",
                "Verify the log level is one of DEBUG, INFO, WARNING, ERROR or CRITICAL",
            ],
            ErrorCategory.UNSUPPORTED: [
                "Only LOB content values can be loaded from or saved to files",
            ],
            ErrorCategory.STORAGE: [
                "Verify the file exists and is readable",
                "Check that the destination directory exists and is writable",
                "Choose a different file",
            ],
            ErrorCategory.TRANSFER: [
                "Check available disk space on the destination",
                "Verify the file content matches the value type (text files must be valid UTF-8)",
                "Retry the transfer",
            ],
            ErrorCategory.CONCURRENCY: [
                "Wait for the running transfer of this value to finish",
            ],
            ErrorCategory.UNKNOWN: [
                "Review error logs for additional context",
            ],
        }

    def categorize_error(self, error: Exception, context: Optional[ErrorContext] = None) -> ErrorInfo:
        """
        Categorize an error and create comprehensive error information.

        Args:
            error: The exception that occurred
            context: Optional context information

        Returns:
            ErrorInfo object with categorized error details
        """
        mapping = self._error_mappings.get(type(error))

        if not mapping:
            # Try to find mapping for parent classes
            for exc_type, exc_mapping in self._error_mappings.items():
                if isinstance(error, exc_type):
                    mapping = exc_mapping
                    break

        if not mapping:
            mapping = {
                "category": ErrorCategory.UNKNOWN,
                "severity": ErrorSeverity.MEDIUM,
                "recoverable": True,
            }

        category = mapping["category"]

        traceback_str = ""
        if error.__traceback__ is not None:
            traceback_str = "".join(traceback.format_exception(error))

        return ErrorInfo(
            error=error,
            category=category,
            severity=mapping["severity"],
            context=context or ErrorContext(),
            recovery_strategies=self._recovery_strategies.get(category, [RecoveryStrategy.MANUAL]),
            remediation_steps=self._remediation_guides.get(category, []),
            traceback_str=traceback_str,
            is_recoverable=mapping["recoverable"],
        )

    def handle_error(self, error: Exception, context: Optional[ErrorContext] = None) -> ErrorInfo:
        """Categorize an error and log it at a level matching its severity."""
        error_info = self.categorize_error(error, context)
        self._log_error(error_info)
        return error_info

    def build_report(
        self,
        result: "TransferResult",
        value_name: Optional[str] = None
    ) -> Optional[FailureReport]:
        """
        Turn a failed transfer result into a user-facing report.

        Returns:
            None for completed or cancelled transfers, which need no report
        """
        if result.error is None or result.cancelled or result.success:
            return None

        error = result.error
        path = error.path or result.path
        context = ErrorContext(
            operation=result.direction.value,
            path=path,
            value_name=value_name,
        )
        error_info = self.handle_error(error, context)

        if result.direction == TransferDirection.EXPORT:
            title = "Could not save content"
            message = f"Could not save content to file '{path}'"
        else:
            title = "Could not load content"
            message = f"Could not load content from file '{path}'"

        cause = error.cause if isinstance(error, ContentTransferError) else None
        return FailureReport(
            title=title,
            message=message,
            path=path,
            cause=str(cause) if cause is not None else error.message,
            error_info=error_info,
        )

    def _log_error(self, error_info: ErrorInfo) -> None:
        """Log error information with appropriate level."""
        log_data = {
            "error_type": type(error_info.error).__name__,
            "error_message": str(error_info.error),
            "category": error_info.category.value,
            "severity": error_info.severity.value,
            "operation": error_info.context.operation,
            "error_path": str(error_info.context.path) if error_info.context.path else None,
            "is_recoverable": error_info.is_recoverable,
        }

        if error_info.severity == ErrorSeverity.CRITICAL:
            self.logger.critical("Critical error occurred", extra=log_data)
        elif error_info.severity == ErrorSeverity.HIGH:
            self.logger.error("High severity error occurred", extra=log_data)
        elif error_info.severity == ErrorSeverity.MEDIUM:
            self.logger.warning("Medium severity error occurred", extra=log_data)
        else:
            self.logger.info("Low severity error occurred", extra=log_data)

        if error_info.traceback_str and error_info.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
            self.logger.debug("Error traceback", extra={"traceback": error_info.traceback_str})
