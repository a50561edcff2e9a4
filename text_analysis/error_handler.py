"""
Error types and central error reporting for the pipeline.

Input and storage failures are raised as typed errors and reach the CLI.
A missing document is the one soft failure: the pipeline reports it in the
JSON output instead of raising.
"""

from enum import Enum
from typing import Optional, Dict, Any, List, Union
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
import traceback
import sys

from .logging_conf import get_logger

logger = get_logger(__name__)


class ErrorSeverity(Enum):
    """Error severity levels."""
    CRITICAL = "critical"  # Run cannot continue
    ERROR = "error"        # Action failed
    WARNING = "warning"    # Action answered with a soft failure
    INFO = "info"


@dataclass
class ErrorContext:
    """Where an error happened."""
    action: Optional[str] = None
    operation: Optional[str] = None
    container_id: Optional[int] = None
    file_path: Optional[str] = None
    user_data: Optional[Dict[str, Any]] = None


def _context_from(kwargs: Dict[str, Any]) -> ErrorContext:
    if kwargs.get('context') is None:
        kwargs['context'] = ErrorContext()
    return kwargs['context']


class BaseApplicationError(Exception):
    """
    Root of the pipeline error hierarchy.

    ``message`` is the technical text that gets logged; ``user_message`` is
    what ends up in the ``error`` field of the JSON output.
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        user_message: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        error_code: Optional[str] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.user_message = user_message or message
        self.context = context or ErrorContext()
        self.error_code = error_code
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)
        self.traceback = traceback.format_exc() if sys.exc_info()[0] else None

    def to_dict(self) -> Dict[str, Any]:
        context = asdict(self.context)
        context.pop("user_data", None)
        return {
            "error_code": self.error_code,
            "severity": self.severity.value,
            "user_message": self.user_message,
            "timestamp": self.timestamp.isoformat(),
            "context": context,
        }


class InputParseError(BaseApplicationError):
    """Malformed JSON input or an invalid action descriptor."""

    def __init__(self, reason: str, **kwargs):
        self.reason = reason
        kwargs.setdefault('severity', ErrorSeverity.CRITICAL)
        kwargs.setdefault('error_code', 'INPUT_PARSE')
        super().__init__(message=f"Parse error: {reason}", **kwargs)


class StorageError(BaseApplicationError):
    """
    Storage read or write failure.

    The message names the operation, e.g. ``StorageError("index_update",
    "Permission denied")`` reads "Index update failed: Permission denied".
    """

    def __init__(self, operation: str, reason: str, file_path: Union[str, Path, None] = None, **kwargs):
        self.operation = operation
        self.reason = reason

        context = _context_from(kwargs)
        context.operation = operation
        if file_path is not None:
            context.file_path = str(file_path)

        label = operation.replace('_', ' ').capitalize()
        kwargs.setdefault('error_code', f'STORAGE_{operation.upper()}')
        super().__init__(message=f"{label} failed: {reason}", **kwargs)


class DocumentNotFoundError(BaseApplicationError):
    """A referenced container does not exist in the store."""

    def __init__(self, container_id: int, **kwargs):
        self.container_id = container_id
        _context_from(kwargs).container_id = container_id
        kwargs.setdefault('severity', ErrorSeverity.WARNING)
        kwargs.setdefault('error_code', 'DOCUMENT_NOT_FOUND')
        super().__init__(
            message=f"Container not found: {container_id}",
            user_message="Document not found",
            **kwargs
        )


class ConfigurationError(BaseApplicationError):
    """Invalid configuration file content."""

    def __init__(self, component: str, issue: str, **kwargs):
        self.component = component
        self.issue = issue
        kwargs.setdefault('error_code', f'CONFIG_{component.upper()}')
        super().__init__(message=f"Configuration error in {component}: {issue}", **kwargs)


_LOG_METHOD = {
    ErrorSeverity.CRITICAL: "critical",
    ErrorSeverity.ERROR: "error",
    ErrorSeverity.WARNING: "warning",
    ErrorSeverity.INFO: "info",
}


class ErrorHandler:
    """Converts, logs and counts errors."""

    def __init__(self):
        self.error_counts: Dict[str, int] = {}
        self.recent_errors: List[BaseApplicationError] = []
        self.max_recent_errors = 100

    def handle_error(
        self,
        error: Union[BaseApplicationError, Exception],
        context: Optional[ErrorContext] = None
    ) -> BaseApplicationError:
        """
        Report an error.

        Foreign exceptions are wrapped first: OSError becomes StorageError,
        ValueError becomes InputParseError, anything else a plain
        BaseApplicationError. For pipeline errors the action of ``context``
        is filled in when the error does not carry one yet.

        Returns:
            The pipeline error, ready to be raised
        """
        if isinstance(error, BaseApplicationError):
            app_error = error
            if context is not None and app_error.context.action is None:
                app_error.context.action = context.action
        else:
            app_error = self._convert_exception(error, context)

        self._log_error(app_error)

        key = app_error.error_code or type(app_error).__name__
        self.error_counts[key] = self.error_counts.get(key, 0) + 1
        self.recent_errors.append(app_error)
        del self.recent_errors[:-self.max_recent_errors]

        return app_error

    @staticmethod
    def _convert_exception(exc: Exception, context: Optional[ErrorContext]) -> BaseApplicationError:
        if isinstance(exc, OSError):
            return StorageError(
                "access",
                exc.strerror or str(exc),
                file_path=exc.filename,
                cause=exc,
                context=context
            )
        if isinstance(exc, ValueError):
            return InputParseError(str(exc), cause=exc, context=context)
        return BaseApplicationError(
            message=str(exc),
            user_message=f"An unexpected error occurred: {type(exc).__name__}",
            cause=exc,
            context=context
        )

    @staticmethod
    def _log_error(error: BaseApplicationError) -> None:
        fields = {
            "error_code": error.error_code,
            "severity": error.severity.value,
            "action": error.context.action,
            "operation": error.context.operation,
            "container_id": error.context.container_id,
            "file_path": error.context.file_path,
        }
        if error.cause is not None:
            fields["cause"] = str(error.cause)
            fields["cause_type"] = type(error.cause).__name__

        getattr(logger, _LOG_METHOD[error.severity])(error.message, **fields)

    def get_error_stats(self) -> Dict[str, Any]:
        return {
            "error_counts": dict(self.error_counts),
            "recent_error_count": len(self.recent_errors),
            "recent_errors": [error.to_dict() for error in self.recent_errors[-10:]]
        }

    def clear_stats(self):
        self.error_counts.clear()
        self.recent_errors.clear()


error_handler = ErrorHandler()


def handle_error(
    error: Union[BaseApplicationError, Exception],
    context: Optional[ErrorContext] = None
) -> BaseApplicationError:
    """Report an error through the process-wide handler."""
    return error_handler.handle_error(error, context)
