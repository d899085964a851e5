"""Derived sprint metrics.

All inputs are expected to have passed entity validation already. Values are
stored at full float precision; rounding for display is left to callers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from src.errors.taxonomy import StructuredError, handle_calculation_error
from src.tracker.exceptions import CalculationError
from src.tracker.models import (
    DEFAULT_MEETING_PERCENTAGE,
    DEFAULT_VELOCITY_WINDOW,
    Sprint,
    SprintFormData,
    derive_net_hours,
)

from .forecasting import calculate_average_velocity, calculate_predicted_capacity

logger = logging.getLogger(__name__)

_HOUR_KEYS = ("totalGrossHours", "onCallHours", "meetingHours", "timeOffHours")


@dataclass
class SprintMetrics:
    new_work_points: float
    planned_points: float
    percent_complete: float
    velocity: float
    predicted_capacity: float = 0.0
    errors: list[StructuredError] = field(default_factory=list)


def _is_hours(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def calculate_team_member_net_hours(
    member: Mapping[str, Any],
    default_meeting_percentage: float = DEFAULT_MEETING_PERCENTAGE,
) -> dict[str, Any]:
    """Fill in meeting hours (when omitted) and net hours on a member payload.

    Returns a new camelCase payload; the input is not modified. Non-numeric
    hour values are passed through untouched for validation to report.
    """
    payload = dict(member)
    gross = payload.get("totalGrossHours")
    if payload.get("meetingHours") is None and _is_hours(gross):
        payload["meetingHours"] = gross * default_meeting_percentage / 100

    hours = [payload.get(key) for key in _HOUR_KEYS]
    if all(_is_hours(h) for h in hours):
        payload["netHours"] = derive_net_hours(*hours)
    return payload


def calculate_new_work_points(total_points_in_sprint: float, carry_over_points_total: float) -> float:
    return total_points_in_sprint - carry_over_points_total


def calculate_planned_points(carry_over_points_total: float, new_work_points: float) -> float:
    return carry_over_points_total + new_work_points


def calculate_percent_complete(points_completed: float, planned_points: float) -> float:
    if planned_points <= 0:
        return 0
    return points_completed / planned_points * 100


def calculate_velocity(points_completed: float, working_hours: float) -> float:
    """Points completed per working hour."""
    if working_hours <= 0:
        return 0
    return points_completed / working_hours


def calculate_sprint_metrics(
    form: SprintFormData,
    working_hours: float,
    history: Sequence[Sprint] = (),
    velocity_window: int = DEFAULT_VELOCITY_WINDOW,
    context: str = "calculate_sprint_metrics",
) -> SprintMetrics:
    """Derive every computed sprint field from validated inputs.

    Order: new work points, planned points, percent complete, velocity,
    then predicted capacity from the rolling mean velocity of ``history``.
    A negative new-work figure is clamped to 0 and reported in ``errors``.
    """
    errors: list[StructuredError] = []

    new_work = calculate_new_work_points(form.total_points_in_sprint, form.carry_over_points_total)
    if new_work < 0:
        exc = CalculationError(
            f"New work points would be negative ({new_work}): carry over points total "
            f"{form.carry_over_points_total} exceeds total points {form.total_points_in_sprint}"
        )
        errors.append(handle_calculation_error(exc, context))
        logger.warning(f"Clamping new work points to 0 for '{form.sprint_name}': {exc}")
        new_work = 0

    planned = calculate_planned_points(form.carry_over_points_total, new_work)
    average_velocity = calculate_average_velocity(history, velocity_window)

    return SprintMetrics(
        new_work_points=new_work,
        planned_points=planned,
        percent_complete=calculate_percent_complete(form.points_completed, planned),
        velocity=calculate_velocity(form.points_completed, working_hours),
        predicted_capacity=calculate_predicted_capacity(average_velocity, working_hours),
        errors=errors,
    )
