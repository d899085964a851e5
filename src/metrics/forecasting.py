"""Forecasting, trend and dashboard aggregates over sprint history.

Sprint sequences are expected in chronological order, most recent last.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from src.tracker.models import DEFAULT_VELOCITY_WINDOW, AppConfig, Sprint, TeamMember

# Max-min velocity spread, relative to the mean, that counts as erratic
HIGH_VARIATION_RATIO = 0.5


def calculate_average_velocity(
    sprints: Sequence[Sprint], number_of_sprints: int = DEFAULT_VELOCITY_WINDOW
) -> float:
    """Mean velocity over the last ``number_of_sprints`` sprints.

    Uses every sprint when fewer are available than the window.
    """
    if not sprints or number_of_sprints <= 0:
        return 0
    recent = sprints[-number_of_sprints:]
    return sum(s.velocity for s in recent) / len(recent)


def calculate_predicted_capacity(average_velocity: float, upcoming_working_hours: float) -> float:
    if average_velocity <= 0 or upcoming_working_hours <= 0:
        return 0
    return average_velocity * upcoming_working_hours


@dataclass
class ForecastingInsights:
    average_velocity: float
    predicted_capacity: float
    data_quality: str
    sprints_used: int
    warnings: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


def get_forecasting_insights(
    sprints: Sequence[Sprint],
    upcoming_working_hours: float,
    number_of_sprints: int = DEFAULT_VELOCITY_WINDOW,
) -> ForecastingInsights:
    average = calculate_average_velocity(sprints, number_of_sprints)
    sprints_used = min(len(sprints), number_of_sprints)
    insights = ForecastingInsights(
        average_velocity=average,
        predicted_capacity=calculate_predicted_capacity(average, upcoming_working_hours),
        data_quality="excellent",
        sprints_used=sprints_used,
    )

    if sprints_used == 0:
        insights.data_quality = "insufficient"
        insights.warnings.append("No historical sprint data available for forecasting")
        insights.recommendations.append("Complete at least 2-3 sprints to get meaningful forecasts")
        return insights

    if sprints_used < 3:
        insights.data_quality = "limited"
        insights.warnings.append(
            f"Only {sprints_used} sprint(s) available for forecasting - predictions may be unreliable"
        )
        insights.recommendations.append("Complete more sprints to improve forecast accuracy")
    elif sprints_used < number_of_sprints:
        insights.data_quality = "good"
        insights.warnings.append(
            f"Using {sprints_used} sprints instead of requested {number_of_sprints} for forecasting"
        )

    velocities = [s.velocity for s in sprints[-sprints_used:]]
    if sprints_used >= 3 and average > 0:
        if (max(velocities) - min(velocities)) / average > HIGH_VARIATION_RATIO:
            insights.warnings.append(
                "High velocity variation detected - forecasts may be less reliable"
            )
            insights.recommendations.append("Review sprint consistency and team capacity planning")

    zero_velocity = sum(1 for v in velocities if v == 0)
    if zero_velocity:
        insights.warnings.append(f"{zero_velocity} sprint(s) with zero velocity detected")
        insights.recommendations.append("Review sprints with zero velocity for data accuracy")

    if insights.data_quality == "good":
        insights.recommendations.append("Complete more sprints to improve forecast accuracy")

    return insights


@dataclass
class VelocityTrend:
    trend: str
    trend_strength: str
    recent_average: float
    previous_average: float
    change_percent: float


def _strength(abs_change_percent: float) -> str:
    if abs_change_percent < 15:
        return "weak"
    if abs_change_percent < 30:
        return "moderate"
    return "strong"


def calculate_velocity_trend(sprints: Sequence[Sprint], window_size: int = 3) -> VelocityTrend:
    """Compare the last ``window_size`` sprints with the window before them."""
    if window_size <= 0 or len(sprints) < window_size * 2:
        return VelocityTrend("insufficient_data", "weak", 0, 0, 0)

    recent = sum(s.velocity for s in sprints[-window_size:]) / window_size
    previous = sum(s.velocity for s in sprints[-window_size * 2 : -window_size]) / window_size
    change = (recent - previous) / previous * 100 if previous > 0 else 0

    if abs(change) < 5:
        return VelocityTrend("stable", "weak", recent, previous, change)
    trend = "improving" if change > 0 else "declining"
    return VelocityTrend(trend, _strength(abs(change)), recent, previous, change)


@dataclass
class CurrentSprintStatus:
    sprint_name: str
    percent_complete: float
    points_completed: float
    planned_points: float


@dataclass
class DashboardMetrics:
    current_sprint_status: CurrentSprintStatus
    average_velocity: float
    forecasted_capacity: float
    capacity_utilization: float
    sprint_completion_rate: float
    points_per_hour: float


def calculate_working_hours(members: Sequence[TeamMember]) -> float:
    """Sum of the members' net hours; over-deducted members contribute 0."""
    return sum(max(0, m.net_hours) for m in members)


def calculate_dashboard_metrics(sprints: Sequence[Sprint], config: AppConfig) -> DashboardMetrics:
    """Headline metrics for the most recent sprint and the rolling window."""
    if not sprints:
        return DashboardMetrics(
            current_sprint_status=CurrentSprintStatus("No sprints available", 0, 0, 0),
            average_velocity=0,
            forecasted_capacity=0,
            capacity_utilization=0,
            sprint_completion_rate=0,
            points_per_hour=0,
        )

    current = sprints[-1]
    average = calculate_average_velocity(sprints, config.velocity_calculation_sprints)
    if config.team_members:
        next_hours = calculate_working_hours(config.team_members)
    else:
        next_hours = current.working_hours

    utilization_total = 0.0
    for sprint in sprints:
        if sprint.working_hours > 0 and average > 0:
            utilization = sprint.points_completed / sprint.working_hours / average * 100
            utilization_total += min(utilization, 100)

    return DashboardMetrics(
        current_sprint_status=CurrentSprintStatus(
            sprint_name=current.sprint_name,
            percent_complete=current.percent_complete,
            points_completed=current.points_completed,
            planned_points=current.planned_points,
        ),
        average_velocity=average,
        forecasted_capacity=calculate_predicted_capacity(average, next_hours),
        capacity_utilization=utilization_total / len(sprints),
        sprint_completion_rate=sum(s.percent_complete for s in sprints) / len(sprints),
        points_per_hour=average,
    )
