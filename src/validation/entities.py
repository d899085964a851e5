"""Whole-entity validators for team members, sprints and app config.

Each validator accepts either a model instance or the raw camelCase payload
(as submitted by a form or read from an import) and returns a fresh
``ValidationResult``. Every violated rule is reported, not just the first.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

from src.tracker.models import ValidationResult, derive_net_hours

from .fields import (
    MAX_BUSINESS_DAYS,
    MAX_HOURS_PER_PERSON,
    MAX_MEETING_PERCENTAGE,
    MAX_POINTS,
    MAX_TEAM_SIZE,
    MAX_VELOCITY_SPRINTS,
    MIN_MEETING_PERCENTAGE,
    MIN_VELOCITY_SPRINTS,
    SPRINT_NAME_MAX_LENGTH,
    TEAM_MEMBER_NAME_MAX_LENGTH,
    is_number,
    validate_iso_timestamp,
    validate_numeric_field,
    validate_string_field,
    validate_url,
)

# Derived point fields are recomputed floats; allow rounding noise
CONSISTENCY_TOLERANCE = 0.01

HOUR_FIELDS: list[tuple[str, str]] = [
    ("totalGrossHours", "Total gross hours"),
    ("onCallHours", "On-call hours"),
    ("meetingHours", "Meeting hours"),
    ("timeOffHours", "Time off hours"),
]

POINT_FIELDS: list[tuple[str, str]] = [
    ("totalPointsInSprint", "Total points in sprint"),
    ("carryOverPointsTotal", "Carry over points total"),
    ("carryOverPointsCompleted", "Carry over points completed"),
    ("unplannedPointsBroughtIn", "Unplanned points brought in"),
    ("pointsCompleted", "Points completed"),
]

DERIVED_FIELDS: list[tuple[str, str]] = [
    ("newWorkPoints", "New work points"),
    ("plannedPoints", "Planned points"),
    ("percentComplete", "Percent complete"),
    ("velocity", "Velocity"),
    ("predictedCapacity", "Predicted capacity"),
]


class _Collector:
    """Accumulates rule failures for one validation call."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.field_errors: dict[str, str] = {}

    def add(self, field_name: str, message: str | None) -> None:
        if message:
            self.errors.append(message)
            self.field_errors[field_name] = message

    def result(self) -> ValidationResult:
        return ValidationResult.from_errors(self.errors, self.field_errors)


def as_payload(value: Any) -> Mapping[str, Any] | None:
    """Return the camelCase mapping for a model or raw payload, else None."""
    if isinstance(value, Mapping):
        return value
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return None


def _not_an_object(label: str) -> ValidationResult:
    message = f"{label} must be an object"
    return ValidationResult.from_errors([message], {"structure": message})


def validate_team_member(member: Any) -> ValidationResult:
    payload = as_payload(member)
    if payload is None:
        return _not_an_object("Team member")

    check = _Collector()
    check.add(
        "name",
        validate_string_field(
            payload.get("name"),
            "Name",
            required=True,
            min_length=1,
            max_length=TEAM_MEMBER_NAME_MAX_LENGTH,
        ),
    )
    for key, label in HOUR_FIELDS:
        check.add(
            key,
            validate_numeric_field(
                payload.get(key),
                label,
                required=True,
                min_value=0,
                max_value=MAX_HOURS_PER_PERSON,
            ),
        )
    check.add("netHours", validate_numeric_field(payload.get("netHours"), "Net hours", required=True))

    hours = [payload.get(key) for key, _ in HOUR_FIELDS]
    if not all(is_number(h) for h in hours):
        return check.result()

    gross, on_call, meeting, time_off = hours
    if on_call + meeting + time_off > gross:
        check.add(
            "general",
            "Total deductions (on-call + meetings + time off) cannot exceed total gross hours",
        )

    net = payload.get("netHours")
    # Exact comparison: net hours are always derived, never hand-entered
    if is_number(net) and net != derive_net_hours(gross, on_call, meeting, time_off):
        check.add("netHours", "Net hours calculation is incorrect")

    return check.result()


def _check_form_fields(check: _Collector, payload: Mapping[str, Any]) -> None:
    check.add(
        "sprintName",
        validate_string_field(
            payload.get("sprintName"),
            "Sprint name",
            required=True,
            max_length=SPRINT_NAME_MAX_LENGTH,
        ),
    )
    check.add("taskeiLink", validate_url(payload.get("taskeiLink"), "Taskei link"))
    check.add(
        "businessDays",
        validate_numeric_field(
            payload.get("businessDays"),
            "Business days",
            required=True,
            allow_zero=False,
            min_value=1,
            max_value=MAX_BUSINESS_DAYS,
            integer=True,
        ),
    )
    check.add(
        "numberOfPeople",
        validate_numeric_field(
            payload.get("numberOfPeople"),
            "Number of people",
            required=True,
            allow_zero=False,
            min_value=1,
            max_value=MAX_TEAM_SIZE,
            integer=True,
        ),
    )
    for key, label in POINT_FIELDS:
        check.add(
            key,
            validate_numeric_field(
                payload.get(key), label, required=True, min_value=0, max_value=MAX_POINTS
            ),
        )

    carry_total = payload.get("carryOverPointsTotal")
    carry_done = payload.get("carryOverPointsCompleted")
    if is_number(carry_total) and is_number(carry_done) and carry_done > carry_total:
        check.add(
            "carryOverPointsCompleted",
            "Carry over completed points cannot exceed carry over total points",
        )


def validate_sprint_form_data(
    data: Any, working_hours: Any, team_member_count: int
) -> ValidationResult:
    """Validate user-supplied sprint inputs before any metrics are derived.

    Args:
        data: SprintFormData or its camelCase payload.
        working_hours: Summed net hours of the selected team members.
        team_member_count: Number of team members selected for the sprint.
    """
    payload = as_payload(data)
    if payload is None:
        return _not_an_object("Sprint")

    check = _Collector()
    _check_form_fields(check, payload)

    if team_member_count < 1:
        check.add("teamMembers", "At least one team member must be selected")
    if not is_number(working_hours) or working_hours <= 0:
        check.add(
            "workingHours",
            "Total working hours must be greater than 0. Check team member configurations.",
        )
    return check.result()


def validate_sprint(sprint: Any) -> ValidationResult:
    """Validate a persisted or imported sprint record in full."""
    payload = as_payload(sprint)
    if payload is None:
        return _not_an_object("Sprint")

    people = payload.get("numberOfPeople")
    form = validate_sprint_form_data(
        payload,
        payload.get("workingHours"),
        int(people) if is_number(people) and math.isfinite(people) else 0,
    )
    check = _Collector()
    check.errors.extend(form.errors)
    check.field_errors.update(form.field_errors)

    check.add("id", validate_string_field(payload.get("id"), "Sprint ID", required=True))
    for key, label in DERIVED_FIELDS:
        check.add(key, validate_numeric_field(payload.get(key), label, required=True))

    total = payload.get("totalPointsInSprint")
    carry_total = payload.get("carryOverPointsTotal")
    new_work = payload.get("newWorkPoints")
    planned = payload.get("plannedPoints")
    if all(is_number(v) for v in (total, carry_total, new_work, planned)):
        expected_new = max(0, total - carry_total)
        if abs(new_work - expected_new) > CONSISTENCY_TOLERANCE:
            check.add("newWorkPoints", "New work points calculation is inconsistent")
        if abs(planned - (carry_total + expected_new)) > CONSISTENCY_TOLERANCE:
            check.add("plannedPoints", "Planned points calculation is inconsistent")

    check.add("createdAt", validate_iso_timestamp(payload.get("createdAt"), "Created date"))
    check.add("updatedAt", validate_iso_timestamp(payload.get("updatedAt"), "Updated date"))
    return check.result()


def _duplicate_names(members: list[Any]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for member in members:
        payload = as_payload(member)
        name = payload.get("name") if payload is not None else None
        if not isinstance(name, str):
            continue
        key = name.strip().lower()
        if key in seen and key not in duplicates:
            duplicates.append(key)
        seen.add(key)
    return duplicates


def validate_app_config(config: Any) -> ValidationResult:
    payload = as_payload(config)
    if payload is None:
        return _not_an_object("Config")

    check = _Collector()
    check.add(
        "velocityCalculationSprints",
        validate_numeric_field(
            payload.get("velocityCalculationSprints"),
            "Velocity calculation sprints",
            required=True,
            allow_zero=False,
            min_value=MIN_VELOCITY_SPRINTS,
            max_value=MAX_VELOCITY_SPRINTS,
            integer=True,
        ),
    )
    check.add(
        "defaultMeetingPercentage",
        validate_numeric_field(
            payload.get("defaultMeetingPercentage"),
            "Default meeting percentage",
            required=True,
            min_value=MIN_MEETING_PERCENTAGE,
            max_value=MAX_MEETING_PERCENTAGE,
        ),
    )

    members = payload.get("teamMembers", [])
    if not isinstance(members, list):
        check.add("teamMembers", "Team members must be a list")
        return check.result()

    for index, member in enumerate(members):
        member_result = validate_team_member(member)
        if member_result.is_valid:
            continue
        for error in member_result.errors:
            check.errors.append(f"Team member {index + 1}: {error}")
        check.field_errors[f"teamMember{index}"] = ", ".join(member_result.errors)

    duplicates = _duplicate_names(members)
    if duplicates:
        check.add(
            "teamMembersDuplicates",
            f"Duplicate team member names found: {', '.join(duplicates)}",
        )
    return check.result()


def format_validation_errors(validation: ValidationResult) -> str:
    if validation.is_valid:
        return ""
    if len(validation.errors) == 1:
        return validation.errors[0]
    return "Multiple validation errors:\n• " + "\n• ".join(validation.errors)


_MARKUP = re.compile(r"[<>]")
_SCRIPT_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)


def sanitize_string(value: str | None, max_length: int = 1000) -> str:
    """Strip markup characters and script hooks from free text."""
    if not value:
        return ""
    text = _MARKUP.sub("", value.strip())
    text = _SCRIPT_PROTOCOL.sub("", text)
    text = _EVENT_HANDLER.sub("", text)
    return text[:max_length]
