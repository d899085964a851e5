"""Tracker exception types.

These are raised inside the core and converted to structured errors at the
boundary by ``src.errors.with_error_handling``.
"""

from __future__ import annotations

from typing import Any

from .models import ValidationResult


class TrackerError(Exception):
    """Base class for failures raised inside the tracker core."""


class ValidationFailedError(TrackerError):
    """Raised when a payload fails entity validation."""

    def __init__(self, context: str, validation: ValidationResult):
        self.context = context
        self.validation = validation
        super().__init__(
            f"Validation failed in {context}: {'; '.join(validation.errors)}"
        )


class DataCorruptionError(TrackerError):
    """Raised when decoded or stored data is structurally unusable."""

    kind = "corruption"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class CsvFormatError(DataCorruptionError):
    kind = "csv"


class JsonFormatError(DataCorruptionError):
    kind = "json"


class JsonSyntaxError(JsonFormatError):
    """The text is not parsable JSON at all."""

    kind = "syntax"


class JsonStructureError(JsonFormatError):
    """The JSON parsed but required top-level keys are missing or mistyped."""

    kind = "structure"


class CalculationError(TrackerError):
    """Raised when a derived value cannot be computed from its inputs."""


class ConfigError(TrackerError):
    """Raised when a settings file cannot be loaded into a valid config."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{message} ({path})" if path else message)
