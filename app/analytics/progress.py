"""Прогресс по активной цели и сводная статистика веса"""
from decimal import Decimal
from typing import Optional, Sequence

from app.analytics.rounding import round1, to_decimal
from app.schemas import GoalProgress, GoalType, WeightStats

HUNDRED = Decimal(100)
WEEK_DAYS = 7


def compute_progress(goal, current_weight: Optional[float]) -> Optional[GoalProgress]:
    """Goal completion for ``current_weight``.

    ``goal`` is anything with start_weight, target_weight and goal_type.
    Returns None when there is no goal or no measurement yet.

    The percentage is clamped to [0, 100]: overshooting the target reads as
    100%, moving away from it reads as 0%.
    """
    if goal is None or current_weight is None:
        return None

    start = to_decimal(goal.start_weight)
    target = to_decimal(goal.target_weight)
    current = to_decimal(current_weight)

    total_change = target - start
    if total_change == 0:
        percentage = Decimal(0)
    else:
        percentage = (current - start) / total_change * HUNDRED
        percentage = min(max(percentage, Decimal(0)), HUNDRED)

    return GoalProgress(
        progress_percentage=round1(percentage),
        current_weight=float(current),
        target_weight=float(target),
        remaining_weight=round1(target - current),
        goal_type=GoalType(goal.goal_type),
    )


def summarize_weights(records: Sequence, period_days: int, goal_weight: Optional[float] = None) -> Optional[WeightStats]:
    """Latest/oldest/average/min/max for records ordered oldest first.

    weekly_average spreads the total change over the days between the first
    and the last record (at least one day).
    """
    if not records:
        return None

    weights = [to_decimal(r.weight) for r in records]
    latest, oldest = weights[-1], weights[0]
    change = latest - oldest
    span_days = max(1, (records[-1].date - records[0].date).days)

    return WeightStats(
        latest=float(latest),
        oldest=float(oldest),
        change=round1(change),
        average=round1(sum(weights) / len(weights)),
        min=float(min(weights)),
        max=float(max(weights)),
        record_count=len(weights),
        period_days=period_days,
        weekly_average=round1(change / span_days * WEEK_DAYS),
        goal_weight=goal_weight,
    )
