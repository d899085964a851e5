"""Sprint creation, editing and bulk recomputation.

Every entry point validates its raw inputs, recomputes the whole record and
returns an ``OperationResult``; a sprint is never partially updated.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable

from src.errors.boundary import OperationResult, with_error_handling
from src.errors.taxonomy import StructuredError
from src.metrics.calculations import SprintMetrics, calculate_sprint_metrics
from src.metrics.forecasting import calculate_working_hours
from src.validation.entities import (
    as_payload,
    sanitize_string,
    validate_sprint_form_data,
    validate_team_member,
)
from src.validation.fields import SPRINT_NAME_MAX_LENGTH

from .exceptions import ValidationFailedError
from .models import AppConfig, Sprint, SprintFormData, TeamMember, ValidationResult, default_config

WarningCallback = Callable[[StructuredError], None]


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_sprint_id() -> str:
    return f"sprint-{uuid.uuid4().hex}"


def _check_members(members: Sequence[Any], context: str) -> list[TeamMember]:
    errors: list[str] = []
    field_errors: dict[str, str] = {}
    for index, member in enumerate(members):
        result = validate_team_member(member)
        if not result.is_valid:
            errors.extend(f"Team member {index + 1}: {e}" for e in result.errors)
            field_errors[f"teamMember{index}"] = ", ".join(result.errors)
    if errors:
        raise ValidationFailedError(context, ValidationResult.from_errors(errors, field_errors))
    return [m if isinstance(m, TeamMember) else TeamMember.from_dict(m) for m in members]


def _build(
    form: SprintFormData | Mapping[str, Any],
    members: Sequence[TeamMember | Mapping[str, Any]],
    history: Sequence[Sprint],
    config: AppConfig,
    context: str,
    on_warning: WarningCallback | None,
) -> tuple[SprintFormData, float, SprintMetrics]:
    team = _check_members(members, context)
    working_hours = calculate_working_hours(team)

    validation = validate_sprint_form_data(form, working_hours, len(team))
    if not validation.is_valid:
        raise ValidationFailedError(context, validation)

    data = form if isinstance(form, SprintFormData) else SprintFormData.from_dict(as_payload(form))
    data = replace(data, sprint_name=sanitize_string(data.sprint_name, SPRINT_NAME_MAX_LENGTH))

    metrics = calculate_sprint_metrics(
        data, working_hours, history, config.velocity_calculation_sprints, context
    )
    if on_warning is not None:
        for error in metrics.errors:
            on_warning(error)
    return data, working_hours, metrics


def _assemble(
    sprint_id: str,
    data: SprintFormData,
    working_hours: float,
    metrics: SprintMetrics,
    created_at: str,
    updated_at: str,
) -> Sprint:
    return Sprint(
        id=sprint_id,
        sprint_name=data.sprint_name,
        business_days=data.business_days,
        number_of_people=data.number_of_people,
        working_hours=working_hours,
        total_points_in_sprint=data.total_points_in_sprint,
        carry_over_points_total=data.carry_over_points_total,
        carry_over_points_completed=data.carry_over_points_completed,
        new_work_points=metrics.new_work_points,
        unplanned_points_brought_in=data.unplanned_points_brought_in,
        points_completed=data.points_completed,
        planned_points=metrics.planned_points,
        percent_complete=metrics.percent_complete,
        velocity=metrics.velocity,
        predicted_capacity=metrics.predicted_capacity,
        created_at=created_at,
        updated_at=updated_at,
        taskei_link=data.taskei_link or None,
    )


def create_sprint(
    form: SprintFormData | Mapping[str, Any],
    selected_members: Sequence[TeamMember | Mapping[str, Any]],
    history: Sequence[Sprint] = (),
    config: AppConfig | None = None,
    on_warning: WarningCallback | None = None,
) -> OperationResult[Sprint]:
    """Validate a sprint submission and build the fully computed record.

    Args:
        form: SprintFormData or its raw camelCase payload.
        selected_members: Team members working this sprint.
        history: Earlier sprints, oldest first, for predicted capacity.
        config: Settings supplying the velocity window; defaults when None.
        on_warning: Receives non-fatal calculation errors (clamped values).
    """
    config = config or default_config()

    def run() -> Sprint:
        data, hours, metrics = _build(
            form, selected_members, history, config, "create_sprint", on_warning
        )
        now = utc_timestamp()
        return _assemble(new_sprint_id(), data, hours, metrics, now, now)

    return with_error_handling(run, "create_sprint")


def update_sprint(
    existing: Sprint,
    form: SprintFormData | Mapping[str, Any],
    selected_members: Sequence[TeamMember | Mapping[str, Any]],
    history: Sequence[Sprint] = (),
    config: AppConfig | None = None,
    on_warning: WarningCallback | None = None,
) -> OperationResult[Sprint]:
    """Revalidate and recompute ``existing`` from edited inputs.

    Keeps the id and creation time, refreshes ``updated_at``. ``existing``
    itself is never modified.
    """
    config = config or default_config()
    others = [s for s in history if s.id != existing.id]

    def run() -> Sprint:
        data, hours, metrics = _build(
            form, selected_members, others, config, "update_sprint", on_warning
        )
        return _assemble(existing.id, data, hours, metrics, existing.created_at, utc_timestamp())

    return with_error_handling(run, "update_sprint")


def recalculate_sprints(sprints: Sequence[Sprint], config: AppConfig | None = None) -> list[Sprint]:
    """Recompute every derived field, each sprint forecasting from its predecessors."""
    config = config or default_config()
    result: list[Sprint] = []
    for sprint in sprints:
        metrics = calculate_sprint_metrics(
            sprint.form_data(),
            sprint.working_hours,
            result,
            config.velocity_calculation_sprints,
            "recalculate_sprints",
        )
        result.append(
            replace(
                sprint,
                new_work_points=metrics.new_work_points,
                planned_points=metrics.planned_points,
                percent_complete=metrics.percent_complete,
                velocity=metrics.velocity,
                predicted_capacity=metrics.predicted_capacity,
            )
        )
    return result
