"""Recovery advice, display formatting and logging for structured errors."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.tracker.models import AppConfig, AppData, default_config

from .taxonomy import ErrorSeverity, ErrorType, StructuredError

logger = logging.getLogger(__name__)

SEVERITY_TITLES: dict[ErrorSeverity, str] = {
    ErrorSeverity.LOW: "Notice",
    ErrorSeverity.MEDIUM: "Warning",
    ErrorSeverity.HIGH: "Error",
    ErrorSeverity.CRITICAL: "Critical Error",
}

_LOG_LEVELS: dict[ErrorSeverity, int] = {
    ErrorSeverity.LOW: logging.INFO,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


@dataclass
class ErrorRecovery:
    can_recover: bool
    suggestions: list[str] = field(default_factory=list)
    fallback_data: Any = None


def create_fallback_data(kind: str, defaults: AppConfig | None = None) -> Any:
    """Build safe replacement data for corrupted or missing storage.

    ``kind`` is one of ``sprints``, ``config`` or ``full``.
    """
    config = defaults if defaults is not None else default_config()
    if kind == "sprints":
        return []
    if kind == "config":
        return config
    if kind == "full":
        return AppData(sprints=[], config=config)
    raise ValueError(f"Unknown fallback kind: {kind}")


def _details_get(error: StructuredError, key: str) -> Any:
    if isinstance(error.details, Mapping):
        return error.details.get(key)
    return None


def get_error_recovery(
    error: StructuredError, defaults: AppConfig | None = None
) -> ErrorRecovery:
    """Determine whether and how the caller can recover from ``error``."""
    if error.type is ErrorType.VALIDATION:
        return ErrorRecovery(
            can_recover=True,
            suggestions=[
                "Please correct the highlighted fields",
                "Check that all required fields are filled",
                "Ensure numeric values are within valid ranges",
            ],
        )

    if error.type is ErrorType.NETWORK:
        suggestions = [
            "Check your internet connection",
            "Try refreshing the page",
            "Wait a moment and try again",
        ]
        if _details_get(error, "status") == 500:
            suggestions.append("The server may be temporarily unavailable")
        return ErrorRecovery(can_recover=True, suggestions=suggestions)

    if error.type is ErrorType.FILE_SYSTEM:
        code = _details_get(error, "code")
        can_recover = error.severity is not ErrorSeverity.CRITICAL
        if code == "ENOENT":
            return ErrorRecovery(
                can_recover=can_recover,
                suggestions=["The application will create a new data file"],
                fallback_data=create_fallback_data("full", defaults),
            )
        if code == "ENOSPC":
            return ErrorRecovery(
                can_recover=can_recover,
                suggestions=["Free up disk space", "Try saving to a different location"],
            )
        return ErrorRecovery(
            can_recover=can_recover,
            suggestions=["Check file permissions", "Try restarting the application"],
        )

    if error.type is ErrorType.DATA_CORRUPTION:
        return ErrorRecovery(
            can_recover=True,
            suggestions=[
                "The application will attempt to recover your data",
                "A backup will be created before any changes",
                "You may need to re-enter some recent data",
            ],
            fallback_data=create_fallback_data("full", defaults),
        )

    if error.type is ErrorType.CALCULATION:
        return ErrorRecovery(
            can_recover=True,
            suggestions=[
                "Check that all numeric inputs are valid",
                "Ensure working hours are greater than zero",
                "Verify that carry-over values are consistent",
            ],
        )

    return ErrorRecovery(
        can_recover=True,
        suggestions=[
            "Try the operation again",
            "Check the application log for more details",
            "Contact support if the problem persists",
        ],
    )


def format_error_for_display(error: StructuredError) -> dict[str, Any]:
    """Map an error to the title/message/retry data shown to a user."""
    recovery = get_error_recovery(error)
    return {
        "title": SEVERITY_TITLES.get(error.severity, "Error"),
        "message": error.user_message,
        "severity": error.severity,
        "suggestions": recovery.suggestions,
        "can_retry": error.severity is not ErrorSeverity.CRITICAL,
    }


def log_error(error: StructuredError) -> None:
    level = _LOG_LEVELS.get(error.severity, logging.ERROR)
    logger.log(
        level,
        f"{error.severity.value.upper()} {error.type.value} error "
        f"[{error.context}]: {error.message}",
    )
    if error.details:
        details = dict(error.details) if isinstance(error.details, Mapping) else error.details
        logger.debug(f"Error details [{error.context}]: {details}")
