"""Data-integrity checks for stored or imported datasets.

``is_data_corrupted`` is a cheap structural sniff test meant to run before
full validation; ``validate_data_integrity`` is the deep check.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from src.tracker.models import ValidationResult

from .entities import validate_app_config, validate_sprint


def _has_identity(sprint: Any) -> bool:
    if not isinstance(sprint, Mapping):
        return False
    sprint_id = sprint.get("id")
    name = sprint.get("sprintName")
    return isinstance(sprint_id, str) and bool(sprint_id) and isinstance(name, str) and bool(name)


def is_data_corrupted(data: Any) -> bool:
    """True when ``data`` cannot possibly be an AppData payload."""
    if not isinstance(data, Mapping):
        return True
    if not isinstance(data.get("sprints"), list):
        return True
    config = data.get("config")
    if not isinstance(config, Mapping) or "velocityCalculationSprints" not in config:
        return True
    return not all(_has_identity(s) for s in data["sprints"])


def validate_data_integrity(data: Any) -> ValidationResult:
    if not isinstance(data, Mapping):
        message = "Data must be a valid object"
        return ValidationResult.from_errors([message], {"structure": message})

    errors: list[str] = []
    field_errors: dict[str, str] = {}

    for key in ("sprints", "config"):
        if key not in data:
            message = f"Data must contain a '{key}' property"
            errors.append(message)
            field_errors[key] = message

    sprints = data.get("sprints")
    if isinstance(sprints, list):
        for index, sprint in enumerate(sprints):
            result = validate_sprint(sprint)
            errors.extend(f"Sprint {index + 1}: {e}" for e in result.errors)
    elif sprints is not None:
        message = "Sprints must be a list"
        errors.append(message)
        field_errors["sprintsType"] = message

    if "config" in data:
        result = validate_app_config(data["config"])
        errors.extend(f"Config: {e}" for e in result.errors)

    return ValidationResult.from_errors(errors, field_errors)
