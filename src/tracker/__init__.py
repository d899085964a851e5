from .exceptions import (
    CalculationError,
    ConfigError,
    CsvFormatError,
    DataCorruptionError,
    JsonStructureError,
    JsonSyntaxError,
    TrackerError,
    ValidationFailedError,
)
from .models import (
    DEFAULT_MEETING_PERCENTAGE,
    DEFAULT_VELOCITY_WINDOW,
    AppConfig,
    AppData,
    Sprint,
    SprintFormData,
    TeamMember,
    ValidationResult,
    default_config,
)

__all__ = [
    "AppConfig",
    "AppData",
    "Sprint",
    "SprintFormData",
    "TeamMember",
    "ValidationResult",
    "default_config",
    "DEFAULT_MEETING_PERCENTAGE",
    "DEFAULT_VELOCITY_WINDOW",
    "TrackerError",
    "ValidationFailedError",
    "DataCorruptionError",
    "CsvFormatError",
    "JsonSyntaxError",
    "JsonStructureError",
    "CalculationError",
    "ConfigError",
]
