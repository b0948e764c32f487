"""Тесты планировщика цели"""
from datetime import date, timedelta

import pytest

from app.analytics import plan_goal, project_path, validate_goal_input
from app.schemas import GoalType
from app.utils.error_handler import ValidationError

TODAY = date(2024, 7, 25)


@pytest.mark.parametrize("target, expected", [
    (70.3, GoalType.MAINTAIN),
    (70.5, GoalType.MAINTAIN),
    (69.5, GoalType.MAINTAIN),
    (70.6, GoalType.GAIN),
    (69.4, GoalType.LOSE),
])
def test_goal_type_dead_zone(target, expected):
    plan = plan_goal(70, target, TODAY + timedelta(days=30), TODAY)
    assert plan.goal_type == expected


def test_minimum_one_week():
    plan = plan_goal(70, 69, TODAY + timedelta(days=3), TODAY)

    assert plan.estimated_days == 3
    assert plan.weeks == 1.0
    assert plan.weekly_target == pytest.approx(1.0)
    assert plan.required_change == -1.0


def test_weekly_target_over_several_weeks():
    plan = plan_goal(58.5, 57.0, TODAY + timedelta(days=28), TODAY)

    assert plan.weeks == 4.0
    assert plan.weekly_target == pytest.approx(0.375)
    assert plan.goal_type == GoalType.LOSE
    assert plan.estimated_date == TODAY + timedelta(days=28)
    assert plan.target_date == TODAY + timedelta(days=28)


def test_healthy_rate_band():
    # 0.5%-1% of 80 kg is 0.4-0.8 kg/week
    healthy = plan_goal(80, 77, TODAY + timedelta(days=35), TODAY)
    too_fast = plan_goal(80, 70, TODAY + timedelta(days=35), TODAY)
    too_slow = plan_goal(80, 79, TODAY + timedelta(days=70), TODAY)

    assert healthy.healthy_weekly_min == pytest.approx(0.4)
    assert healthy.healthy_weekly_max == pytest.approx(0.8)
    assert healthy.weekly_recommended == pytest.approx(0.6)
    assert healthy.weekly_target == pytest.approx(0.6)
    assert healthy.is_healthy_goal is True
    assert too_fast.is_healthy_goal is False
    assert too_slow.is_healthy_goal is False


def test_healthy_band_edges_are_inclusive():
    # 100 kg, 0.5 kg/week exactly at the lower edge
    plan = plan_goal(100, 98, TODAY + timedelta(days=28), TODAY)
    assert plan.weekly_target == pytest.approx(0.5)
    assert plan.is_healthy_goal is True


@pytest.mark.parametrize("current, target, field", [
    (None, 60, "current_weight"),
    ("", 60, "current_weight"),
    ("abc", 60, "current_weight"),
    (0, 60, "current_weight"),
    (-5, 60, "current_weight"),
    (1000.1, 60, "current_weight"),
    (70, None, "target_weight"),
    (70, float("nan"), "target_weight"),
    (70, True, "target_weight"),
])
def test_invalid_weights(current, target, field):
    with pytest.raises(ValidationError) as exc_info:
        validate_goal_input(current, target, TODAY + timedelta(days=10), TODAY)

    assert exc_info.value.field == field
    assert exc_info.value.status_code == 400


def test_upper_weight_bound_is_inclusive():
    current, target = validate_goal_input("1000", 999.9, TODAY + timedelta(days=10), TODAY)
    assert float(current) == 1000.0


@pytest.mark.parametrize("target_date", [None, TODAY, TODAY - timedelta(days=1)])
def test_target_date_must_be_after_today(target_date):
    with pytest.raises(ValidationError) as exc_info:
        plan_goal(70, 65, target_date, TODAY)

    assert exc_info.value.field == "target_date"


def test_projection_path():
    points = list(project_path(60.0, 58.0, 0.5))

    assert [p.week for p in points] == [0, 1, 2, 3, 4]
    assert [p.projected_weight for p in points] == [60.0, 59.5, 59.0, 58.5, 58.0]


def test_projection_is_capped_at_12_weeks():
    points = list(project_path(90.0, 70.0, 0.5))

    assert len(points) == 13
    assert points[0].projected_weight == 90.0
    assert points[-1].week == 12
    assert points[-1].projected_weight == 70.0


def test_projection_is_restartable():
    first = list(project_path(70.0, 72.0, 0.4))
    second = list(project_path(70.0, 72.0, 0.4))

    assert first == second
    assert first[-1].projected_weight == 72.0


def test_projection_degenerate_inputs():
    assert [p.week for p in project_path(70.0, 70.0, 0.0)] == [0]
    assert [p.projected_weight for p in project_path(70.0, 75.0, 0)] == [70.0]
