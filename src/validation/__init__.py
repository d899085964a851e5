from .entities import (
    format_validation_errors,
    sanitize_string,
    validate_app_config,
    validate_sprint,
    validate_sprint_form_data,
    validate_team_member,
)
from .fields import validate_numeric_field, validate_string_field, validate_url
from .integrity import is_data_corrupted, validate_data_integrity

__all__ = [
    "validate_string_field",
    "validate_numeric_field",
    "validate_url",
    "validate_team_member",
    "validate_sprint_form_data",
    "validate_sprint",
    "validate_app_config",
    "format_validation_errors",
    "sanitize_string",
    "is_data_corrupted",
    "validate_data_integrity",
]
