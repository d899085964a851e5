from .calculations import (
    SprintMetrics,
    calculate_new_work_points,
    calculate_percent_complete,
    calculate_planned_points,
    calculate_sprint_metrics,
    calculate_team_member_net_hours,
    calculate_velocity,
)
from .forecasting import (
    CurrentSprintStatus,
    DashboardMetrics,
    ForecastingInsights,
    VelocityTrend,
    calculate_average_velocity,
    calculate_dashboard_metrics,
    calculate_predicted_capacity,
    calculate_velocity_trend,
    calculate_working_hours,
    get_forecasting_insights,
)

__all__ = [
    "SprintMetrics",
    "calculate_team_member_net_hours",
    "calculate_working_hours",
    "calculate_new_work_points",
    "calculate_planned_points",
    "calculate_percent_complete",
    "calculate_velocity",
    "calculate_sprint_metrics",
    "calculate_average_velocity",
    "calculate_predicted_capacity",
    "ForecastingInsights",
    "get_forecasting_insights",
    "VelocityTrend",
    "calculate_velocity_trend",
    "CurrentSprintStatus",
    "DashboardMetrics",
    "calculate_dashboard_metrics",
]
