"""Settings: loading defaults from YAML and the settings-update operation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from src.errors.boundary import OperationResult, with_error_handling
from src.metrics.calculations import calculate_team_member_net_hours
from src.validation.entities import as_payload, validate_app_config
from src.validation.fields import is_number

from .exceptions import ConfigError, ValidationFailedError
from .models import DEFAULT_MEETING_PERCENTAGE, AppConfig, ValidationResult, default_config

logger = logging.getLogger(__name__)


def _merge(base: AppConfig, patch: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay ``patch`` on ``base`` and fill in derived member hours."""
    merged = {**base.to_dict(), **patch}
    percentage = merged.get("defaultMeetingPercentage")
    if not is_number(percentage):
        percentage = DEFAULT_MEETING_PERCENTAGE

    members = merged.get("teamMembers")
    if isinstance(members, list):
        derived = []
        for member in members:
            payload = as_payload(member)
            derived.append(
                calculate_team_member_net_hours(payload, percentage) if payload is not None else member
            )
        merged["teamMembers"] = derived
    return merged


def load_defaults(path: str | Path) -> AppConfig:
    """Load an AppConfig from a YAML settings file.

    Keys use the camelCase names of the JSON format; anything omitted keeps
    its built-in default. A missing file yields the built-in defaults.

    Raises:
        ConfigError: Unparsable YAML, a non-mapping document, or settings
            that fail validation.
    """
    path = Path(path)
    if not path.exists():
        logger.info(f"No settings file at {path}, using built-in defaults")
        return default_config()

    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in settings file: {e}", str(path)) from None

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ConfigError("Settings file must contain a mapping", str(path))

    merged = _merge(default_config(), document)
    validation = validate_app_config(merged)
    if not validation.is_valid:
        raise ConfigError(f"Invalid settings: {'; '.join(validation.errors)}", str(path))

    config = AppConfig.from_dict(merged)
    logger.debug(
        f"Loaded settings from {path}: window={config.velocity_calculation_sprints}, "
        f"members={len(config.team_members)}"
    )
    return config


def update_settings(
    current: AppConfig | None,
    patch: Any,
    defaults: AppConfig | None = None,
) -> OperationResult[AppConfig]:
    """Apply a partial settings payload, all or nothing.

    On success returns a new AppConfig; ``current`` is never modified, so a
    failed update leaves the previous settings in force.
    """
    base = current if current is not None else (defaults or default_config())

    def run() -> AppConfig:
        if not isinstance(patch, Mapping):
            message = "Settings must be an object"
            raise ValidationFailedError(
                "update_settings", ValidationResult.from_errors([message], {"structure": message})
            )
        merged = _merge(base, patch)
        validation = validate_app_config(merged)
        if not validation.is_valid:
            raise ValidationFailedError("update_settings", validation)
        return AppConfig.from_dict(merged)

    return with_error_handling(run, "update_settings")
