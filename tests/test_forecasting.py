"""Tests for forecasting, velocity trend and dashboard metrics."""

import pytest

from conftest import make_member, make_sprint
from src.metrics.forecasting import (
    calculate_average_velocity,
    calculate_dashboard_metrics,
    calculate_predicted_capacity,
    calculate_velocity_trend,
    get_forecasting_insights,
)
from src.tracker.models import AppConfig


def _sprints(*velocities):
    return [make_sprint(i, velocity=v) for i, v in enumerate(velocities, start=1)]


class TestAverageVelocity:
    def test_window(self):
        assert calculate_average_velocity(_sprints(0.1, 0.5, 0.7), 2) == pytest.approx(0.6)

    def test_fewer_than_window(self):
        assert calculate_average_velocity(_sprints(0.4, 0.6), 6) == pytest.approx(0.5)

    def test_empty(self):
        assert calculate_average_velocity([], 6) == 0

    def test_predicted_capacity(self):
        assert calculate_predicted_capacity(0.5, 80) == 40
        assert calculate_predicted_capacity(0, 80) == 0
        assert calculate_predicted_capacity(0.5, 0) == 0


class TestForecastingInsights:
    def test_no_history(self):
        insights = get_forecasting_insights([], 80)
        assert insights.data_quality == "insufficient"
        assert insights.sprints_used == 0
        assert insights.predicted_capacity == 0

    def test_limited(self):
        insights = get_forecasting_insights(_sprints(0.5, 0.5), 80, 6)
        assert insights.data_quality == "limited"
        assert insights.predicted_capacity == pytest.approx(40)

    def test_good(self):
        insights = get_forecasting_insights(_sprints(0.5, 0.5, 0.5, 0.5), 80, 6)
        assert insights.data_quality == "good"
        assert any("instead of requested 6" in w for w in insights.warnings)

    def test_excellent(self):
        insights = get_forecasting_insights(_sprints(0.5, 0.5, 0.5), 80, 3)
        assert insights.data_quality == "excellent"
        assert insights.warnings == []

    def test_high_variation(self):
        insights = get_forecasting_insights(_sprints(0.2, 0.8, 0.5), 80, 3)
        assert any("High velocity variation" in w for w in insights.warnings)

    def test_zero_velocity(self):
        insights = get_forecasting_insights(_sprints(0.5, 0, 0.5), 80, 3)
        assert any("zero velocity" in w for w in insights.warnings)


class TestVelocityTrend:
    def test_insufficient(self):
        assert calculate_velocity_trend(_sprints(0.5, 0.5), 3).trend == "insufficient_data"

    def test_stable(self):
        trend = calculate_velocity_trend(_sprints(0.5, 0.5, 0.5, 0.5, 0.51, 0.5), 3)
        assert trend.trend == "stable"

    def test_improving_strong(self):
        trend = calculate_velocity_trend(_sprints(0.4, 0.4, 0.4, 0.6, 0.6, 0.6), 3)
        assert trend.trend == "improving"
        assert trend.trend_strength == "strong"
        assert trend.change_percent == pytest.approx(50)

    def test_declining_moderate(self):
        trend = calculate_velocity_trend(_sprints(0.5, 0.5, 0.5, 0.4, 0.4, 0.4), 3)
        assert trend.trend == "declining"
        assert trend.trend_strength == "moderate"


class TestDashboardMetrics:
    def test_empty(self):
        dashboard = calculate_dashboard_metrics([], AppConfig())
        assert dashboard.current_sprint_status.sprint_name == "No sprints available"
        assert dashboard.average_velocity == 0

    def test_uses_team_hours_for_forecast(self):
        config = AppConfig(velocity_calculation_sprints=3, team_members=[make_member(gross=40, meeting=0)])
        dashboard = calculate_dashboard_metrics(_sprints(0.5, 0.5), config)
        assert dashboard.forecasted_capacity == pytest.approx(20)
        assert dashboard.current_sprint_status.sprint_name == "Sprint 2"

    def test_falls_back_to_last_sprint_hours(self):
        dashboard = calculate_dashboard_metrics(_sprints(0.5, 0.5), AppConfig())
        assert dashboard.forecasted_capacity == pytest.approx(26)

    def test_utilization_capped(self):
        dashboard = calculate_dashboard_metrics(_sprints(0.2, 0.8), AppConfig())
        # 0.2/0.5 -> 40%, 0.8/0.5 -> 160% capped at 100
        assert dashboard.capacity_utilization == pytest.approx(70)
