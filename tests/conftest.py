"""Shared test configuration."""

from __future__ import annotations

import pytest

from src.tracker.models import AppConfig, Sprint, TeamMember, default_config


def make_member(name="Alice", gross=40, on_call=0, meeting=8, time_off=0) -> TeamMember:
    return TeamMember(
        name=name,
        total_gross_hours=gross,
        on_call_hours=on_call,
        meeting_hours=meeting,
        time_off_hours=time_off,
        net_hours=gross - on_call - meeting - time_off,
    )


def make_sprint(index=1, velocity=0.5, working_hours=52, **overrides) -> Sprint:
    """A self-consistent sprint: 30 points planned, completed points follow velocity."""
    points_completed = velocity * working_hours
    values = dict(
        id=f"sprint-{index}",
        sprint_name=f"Sprint {index}",
        business_days=10,
        number_of_people=2,
        working_hours=working_hours,
        total_points_in_sprint=30,
        carry_over_points_total=5,
        carry_over_points_completed=3,
        new_work_points=25,
        unplanned_points_brought_in=2,
        points_completed=points_completed,
        planned_points=30,
        percent_complete=points_completed / 30 * 100,
        velocity=velocity,
        predicted_capacity=0,
        created_at="2024-01-01T09:00:00.000Z",
        updated_at="2024-01-01T09:00:00.000Z",
    )
    values.update(overrides)
    return Sprint(**values)


@pytest.fixture
def team() -> list[TeamMember]:
    return [
        make_member("Alice", gross=40, meeting=8),
        make_member("Bob", gross=30, on_call=4, meeting=6),
    ]


@pytest.fixture
def config(team) -> AppConfig:
    return AppConfig(velocity_calculation_sprints=3, default_meeting_percentage=20, team_members=team)


@pytest.fixture
def defaults() -> AppConfig:
    return default_config()


@pytest.fixture
def history() -> list[Sprint]:
    return [make_sprint(i, velocity=v) for i, v in enumerate([0.4, 0.5, 0.6, 0.5], start=1)]


@pytest.fixture
def form_payload() -> dict:
    return {
        "sprintName": "Sprint 42",
        "businessDays": 10,
        "numberOfPeople": 2,
        "totalPointsInSprint": 30,
        "carryOverPointsTotal": 5,
        "carryOverPointsCompleted": 3,
        "unplannedPointsBroughtIn": 2,
        "pointsCompleted": 25,
    }
