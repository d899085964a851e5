"""Structured error taxonomy.

Every failure inside the tracker core is described by a ``StructuredError``:
a type, a severity, a diagnostic message, a display-safe user message, an
opaque details payload, the operation context and a timestamp. The
``handle_*`` constructors map raw failures onto that shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any

from src.tracker.models import ValidationResult


class ErrorType(Enum):
    VALIDATION = "validation"
    NETWORK = "network"
    FILE_SYSTEM = "file_system"
    DATA_CORRUPTION = "data_corruption"
    CALCULATION = "calculation"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class StructuredError:
    type: ErrorType
    severity: ErrorSeverity
    message: str
    user_message: str
    details: Any = None
    context: str | None = None
    timestamp: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.details, Mapping) and not isinstance(self.details, MappingProxyType):
            object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "userMessage": self.user_message,
            "details": dict(self.details) if isinstance(self.details, Mapping) else self.details,
            "context": self.context,
            "timestamp": self.timestamp,
        }


NETWORK_MESSAGES: dict[int, tuple[str, ErrorSeverity]] = {
    400: ("Invalid request. Please check your input and try again.", ErrorSeverity.MEDIUM),
    401: ("Authentication required. Please refresh the page.", ErrorSeverity.HIGH),
    403: ("Access denied. You don't have permission to perform this action.", ErrorSeverity.HIGH),
    404: ("The requested resource was not found.", ErrorSeverity.MEDIUM),
    429: ("Too many requests. Please wait a moment and try again.", ErrorSeverity.MEDIUM),
    500: ("Server error. Please try again later.", ErrorSeverity.HIGH),
}

FILE_SYSTEM_MESSAGES: dict[str, tuple[str, ErrorSeverity]] = {
    "ENOENT": ("Data file not found. The application will create a new one.", ErrorSeverity.LOW),
    "EACCES": ("Permission denied. Please check file permissions.", ErrorSeverity.CRITICAL),
    "ENOSPC": ("Not enough disk space. Please free up space and try again.", ErrorSeverity.CRITICAL),
    "EMFILE": (
        "Too many files open. Please close other applications and try again.",
        ErrorSeverity.HIGH,
    ),
}

DATA_CORRUPTION_MESSAGE = (
    "Data file appears to be corrupted. "
    "The application will attempt to recover or create a backup."
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_error(
    type: ErrorType,
    severity: ErrorSeverity,
    message: str,
    user_message: str,
    details: Any = None,
    context: str | None = None,
) -> StructuredError:
    """Stamp a timestamp and build an immutable StructuredError."""
    return StructuredError(
        type=type,
        severity=severity,
        message=message,
        user_message=user_message,
        details=details,
        context=context,
        timestamp=_now_iso(),
    )


def handle_validation_error(validation: ValidationResult, context: str) -> StructuredError:
    if len(validation.errors) == 1:
        user_message = validation.errors[0]
    else:
        bullets = "\n".join(f"• {e}" for e in validation.errors)
        user_message = f"Please fix the following issues:\n{bullets}"
    return create_error(
        ErrorType.VALIDATION,
        ErrorSeverity.MEDIUM,
        f"Validation failed in {context}",
        user_message,
        dict(validation.field_errors),
        context,
    )


def handle_network_error(
    context: str,
    status: int | None = None,
    message: str | None = None,
    response: Any = None,
) -> StructuredError:
    user_message = "A network error occurred. Please check your connection and try again."
    severity = ErrorSeverity.MEDIUM
    if status:
        user_message, severity = NETWORK_MESSAGES.get(
            status, (f"Network error ({status}). Please try again.", ErrorSeverity.MEDIUM)
        )
    return create_error(
        ErrorType.NETWORK,
        severity,
        f"Network error in {context}: {message or 'Unknown error'}",
        user_message,
        {"status": status, "response": response},
        context,
    )


def handle_file_system_error(
    context: str,
    code: str | None = None,
    message: str | None = None,
    path: str | None = None,
) -> StructuredError:
    user_message = "File system error occurred. Please try again."
    severity = ErrorSeverity.HIGH
    if code:
        user_message, severity = FILE_SYSTEM_MESSAGES.get(
            code, (f"File system error ({code}). Please try again.", ErrorSeverity.HIGH)
        )
    return create_error(
        ErrorType.FILE_SYSTEM,
        severity,
        f"File system error in {context}: {message}",
        user_message,
        {"code": code, "path": path},
        context,
    )


def handle_data_corruption_error(
    details: Any, context: str, reason: str | None = None
) -> StructuredError:
    message = f"Data corruption detected in {context}"
    if reason:
        message = f"{message}: {reason}"
    return create_error(
        ErrorType.DATA_CORRUPTION,
        ErrorSeverity.HIGH,
        message,
        DATA_CORRUPTION_MESSAGE,
        details,
        context,
    )


def handle_calculation_error(exc: BaseException, context: str) -> StructuredError:
    return create_error(
        ErrorType.CALCULATION,
        ErrorSeverity.MEDIUM,
        f"Calculation error in {context}: {exc}",
        "Calculation error occurred. Please check your input values.",
        {"exception": type(exc).__name__},
        context,
    )


def handle_unknown_error(exc: BaseException, context: str) -> StructuredError:
    return create_error(
        ErrorType.UNKNOWN,
        ErrorSeverity.HIGH,
        f"Unknown error in {context}: {str(exc) or 'No message'}",
        "An unexpected error occurred. Please try again or contact support.",
        {"name": type(exc).__name__},
        context,
    )
