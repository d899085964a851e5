"""Domain models for the sprint tracker."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_VELOCITY_WINDOW = 6
DEFAULT_MEETING_PERCENTAGE = 20


def derive_net_hours(
    total_gross_hours: float,
    on_call_hours: float,
    meeting_hours: float,
    time_off_hours: float,
) -> float:
    """Net hours = gross minus on-call, meeting and time-off deductions."""
    return total_gross_hours - on_call_hours - meeting_hours - time_off_hours


def camel_key(name: str) -> str:
    """Map a snake_case attribute name to the camelCase key used in text formats."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _dump(obj) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        # Optional fields are omitted rather than written as null
        if value is None and f.default is None:
            continue
        data[camel_key(f.name)] = value
    return data


def _load_kwargs(cls, data: Mapping[str, Any]) -> dict[str, Any]:
    kwargs = {}
    for f in fields(cls):
        key = camel_key(f.name)
        if key in data:
            kwargs[f.name] = data[key]
    return kwargs


@dataclass
class TeamMember:
    name: str
    total_gross_hours: float
    on_call_hours: float
    meeting_hours: float
    time_off_hours: float
    net_hours: float

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TeamMember:
        return cls(**_load_kwargs(cls, data))


@dataclass
class SprintFormData:
    """The raw, user-supplied subset of a sprint."""

    sprint_name: str
    business_days: int
    number_of_people: int
    total_points_in_sprint: float
    carry_over_points_total: float
    carry_over_points_completed: float
    unplanned_points_brought_in: float
    points_completed: float
    taskei_link: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SprintFormData:
        return cls(**_load_kwargs(cls, data))


@dataclass
class Sprint:
    """A persisted, fully computed sprint record."""

    id: str
    sprint_name: str
    business_days: int
    number_of_people: int
    working_hours: float
    total_points_in_sprint: float
    carry_over_points_total: float
    carry_over_points_completed: float
    new_work_points: float
    unplanned_points_brought_in: float
    points_completed: float
    planned_points: float
    percent_complete: float
    velocity: float
    predicted_capacity: float
    created_at: str
    updated_at: str
    taskei_link: str | None = None

    def form_data(self) -> SprintFormData:
        return SprintFormData(
            sprint_name=self.sprint_name,
            business_days=self.business_days,
            number_of_people=self.number_of_people,
            total_points_in_sprint=self.total_points_in_sprint,
            carry_over_points_total=self.carry_over_points_total,
            carry_over_points_completed=self.carry_over_points_completed,
            unplanned_points_brought_in=self.unplanned_points_brought_in,
            points_completed=self.points_completed,
            taskei_link=self.taskei_link,
        )

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Sprint:
        return cls(**_load_kwargs(cls, data))


@dataclass
class AppConfig:
    velocity_calculation_sprints: int = DEFAULT_VELOCITY_WINDOW
    default_meeting_percentage: float = DEFAULT_MEETING_PERCENTAGE
    team_members: list[TeamMember] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "velocityCalculationSprints": self.velocity_calculation_sprints,
            "defaultMeetingPercentage": self.default_meeting_percentage,
            "teamMembers": [m.to_dict() for m in self.team_members],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AppConfig:
        return cls(
            velocity_calculation_sprints=data["velocityCalculationSprints"],
            default_meeting_percentage=data["defaultMeetingPercentage"],
            team_members=[TeamMember.from_dict(m) for m in data.get("teamMembers", [])],
        )


@dataclass
class AppData:
    sprints: list[Sprint] = field(default_factory=list)
    config: AppConfig = field(default_factory=AppConfig)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sprints": [s.to_dict() for s in self.sprints],
            "config": self.config.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AppData:
        return cls(
            sprints=[Sprint.from_dict(s) for s in data["sprints"]],
            config=AppConfig.from_dict(data["config"]),
        )


def default_config() -> AppConfig:
    """Return a fresh default configuration.

    Callers inject this (or their own substitute) wherever defaults are
    needed; nothing reads module-level config state implicitly.
    """
    return AppConfig(
        velocity_calculation_sprints=DEFAULT_VELOCITY_WINDOW,
        default_meeting_percentage=DEFAULT_MEETING_PERCENTAGE,
        team_members=[],
    )


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single validation call.

    Attributes:
        is_valid: True when no rule was violated.
        errors: Human-readable messages, in the order the rules ran.
        field_errors: Field name -> message for the failing fields.
    """

    is_valid: bool
    errors: tuple[str, ...] = ()
    field_errors: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(is_valid=True)

    @classmethod
    def from_errors(
        cls, errors: list[str], field_errors: Mapping[str, str] | None = None
    ) -> ValidationResult:
        return cls(
            is_valid=not errors,
            errors=tuple(errors),
            field_errors=MappingProxyType(dict(field_errors or {})),
        )
