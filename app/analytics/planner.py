"""Планировщик цели: тип цели, недельный темп, проверка здорового темпа.

Здоровым считается изменение на 0.5%-1% текущего веса в неделю. Проверка
только подсказка для интерфейса, сохранить цель можно и с "нездоровым" темпом.
"""
import math
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Iterator, Optional

from app.analytics.rounding import round1, to_decimal
from app.schemas import GoalPlan, GoalType, ProjectionPoint, MAX_WEIGHT_KG
from app.utils.error_handler import ValidationError

MAINTAIN_DEAD_ZONE = Decimal('0.5')
HEALTHY_WEEKLY_MIN_RATIO = Decimal('0.005')
HEALTHY_WEEKLY_MAX_RATIO = Decimal('0.01')
MIN_WEEKS = Decimal(1)
MAX_PROJECTION_WEEKS = 12


def parse_weight(value, field: str) -> Decimal:
    """Weight must be present, numeric and in (0, 1000]"""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required", field=field)
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)

    try:
        weight = to_decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field} must be a number", field=field)

    if not weight.is_finite():
        raise ValidationError(f"{field} must be a number", field=field)
    if weight <= 0 or weight > Decimal(str(MAX_WEIGHT_KG)):
        raise ValidationError(f"{field} must be between 0 and {MAX_WEIGHT_KG:g} kg", field=field)
    return weight


def validate_goal_input(current_weight, target_weight, target_date: Optional[date], today: date):
    """Проверяет ввод цели, возвращает (current, target) как Decimal"""
    current = parse_weight(current_weight, "current_weight")
    target = parse_weight(target_weight, "target_weight")

    if target_date is None:
        raise ValidationError("target_date is required", field="target_date")
    if target_date <= today:
        raise ValidationError("target_date must be after today", field="target_date")

    return current, target


def classify_goal(required_change: Decimal) -> GoalType:
    if abs(required_change) <= MAINTAIN_DEAD_ZONE:
        return GoalType.MAINTAIN
    if required_change > 0:
        return GoalType.GAIN
    return GoalType.LOSE


def plan_goal(current_weight, target_weight, target_date: Optional[date], today: date) -> GoalPlan:
    """Рассчитывает темп для цели.

    weeks = max(1, days / 7): цель через 3 дня считается как одна неделя,
    чтобы недельный темп не раздувался.
    """
    current, target = validate_goal_input(current_weight, target_weight, target_date, today)

    required_change = target - current
    days_diff = (target_date - today).days
    weeks = max(MIN_WEEKS, Decimal(days_diff) / 7)
    weekly_target = abs(required_change) / weeks

    healthy_min = current * HEALTHY_WEEKLY_MIN_RATIO
    healthy_max = current * HEALTHY_WEEKLY_MAX_RATIO

    return GoalPlan(
        current_weight=float(current),
        target_weight=float(target),
        target_date=target_date,
        required_change=round1(required_change),
        estimated_days=days_diff,
        estimated_date=today + timedelta(days=days_diff),
        weeks=float(weeks),
        weekly_target=float(weekly_target),
        weekly_recommended=float((healthy_min + healthy_max) / 2),
        healthy_weekly_min=float(healthy_min),
        healthy_weekly_max=float(healthy_max),
        is_healthy_goal=healthy_min <= weekly_target <= healthy_max,
        goal_type=classify_goal(required_change),
    )


def project_path(current_weight: float, target_weight: float, weekly_target: float) -> Iterator[ProjectionPoint]:
    """Linear path from current to target weight, one point per week.

    At most 13 points (weeks 0..12). Call again to restart.
    """
    current = to_decimal(current_weight)
    required_change = to_decimal(target_weight) - current
    weekly = abs(to_decimal(weekly_target))

    if required_change == 0 or weekly == 0:
        yield ProjectionPoint(week=0, projected_weight=float(current))
        return

    weeks = min(MAX_PROJECTION_WEEKS, math.ceil(abs(required_change) / weekly))
    for week in range(weeks + 1):
        yield ProjectionPoint(
            week=week,
            projected_weight=round1(current + required_change * week / weeks),
        )
