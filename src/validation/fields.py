"""Field-level validators.

Pure predicates over single primitive values. Each returns ``None`` when the
value is valid, or the first failing rule's message.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from numbers import Real
from typing import Any

URL_PATTERN = re.compile(r"^https?://.+")

SPRINT_NAME_MAX_LENGTH = 100
TEAM_MEMBER_NAME_MAX_LENGTH = 100
MAX_BUSINESS_DAYS = 30
MAX_TEAM_SIZE = 100
MAX_HOURS_PER_PERSON = 200
MAX_POINTS = 1000
MIN_VELOCITY_SPRINTS = 1
MAX_VELOCITY_SPRINTS = 20
MIN_MEETING_PERCENTAGE = 0
MAX_MEETING_PERCENTAGE = 100


def is_number(value: Any) -> bool:
    """True for real numbers, excluding bools and NaN."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return not math.isnan(value)


def validate_string_field(
    value: Any,
    label: str,
    *,
    required: bool = False,
    min_length: int = 0,
    max_length: int | None = None,
    pattern: re.Pattern | None = None,
    pattern_message: str | None = None,
) -> str | None:
    """Check required, then min length, then max length, then pattern."""
    if value is not None and not isinstance(value, str):
        return f"{label} must be text"

    text = (value or "").strip()
    if required and not text:
        return f"{label} is required"
    if not text:
        return None
    if len(text) < min_length:
        return f"{label} must be at least {min_length} characters long"
    if max_length is not None and len(text) > max_length:
        return f"{label} must be no more than {max_length} characters long"
    if pattern is not None and not pattern.search(text):
        return pattern_message or f"{label} format is invalid"
    return None


def validate_numeric_field(
    value: Any,
    label: str,
    *,
    required: bool = False,
    allow_zero: bool = True,
    min_value: float | None = None,
    max_value: float | None = None,
    integer: bool = False,
) -> str | None:
    """Check presence, zero, bounds and integrality; first failure wins.

    Values are never coerced: a string holding digits is rejected.
    """
    missing = value is None or (isinstance(value, float) and math.isnan(value))
    if missing:
        return f"{label} is required" if required else None
    if not is_number(value):
        return f"{label} must be a number"

    if required and not allow_zero and value == 0:
        return f"{label} must be greater than 0"
    if min_value is not None and value < min_value:
        return f"{label} must be at least {min_value}"
    if max_value is not None and value > max_value:
        return f"{label} must be no more than {max_value}"
    if integer and not float(value).is_integer():
        return f"{label} must be a whole number"
    return None


def validate_url(value: Any, label: str, required: bool = False) -> str | None:
    if value is not None and not isinstance(value, str):
        return f"{label} must be text"
    if not value:
        return f"{label} is required" if required else None
    if not URL_PATTERN.match(value):
        return f"{label} must be a valid URL starting with http:// or https://"
    return None


def validate_iso_timestamp(value: Any, label: str) -> str | None:
    if not isinstance(value, str) or not value:
        return f"{label} is invalid"
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return f"{label} is invalid"
    return None
