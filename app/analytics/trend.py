"""Анализ тренда веса за период"""
from decimal import Decimal
from typing import List, Sequence

from app.analytics.rounding import round1, to_decimal
from app.schemas import Trend, TrendLinePoint, TrendResult

# kg, strict comparison: exactly +-0.5 is still stable
TREND_THRESHOLD = Decimal('0.5')


def classify_change(change: Decimal) -> Trend:
    if change > TREND_THRESHOLD:
        return Trend.INCREASING
    if change < -TREND_THRESHOLD:
        return Trend.DECREASING
    return Trend.STABLE


def analyze_trend(records: Sequence, period_days: int) -> TrendResult:
    """Compute trend from records ordered newest first.

    Records are expected to be already restricted to the lookback window,
    no date filtering happens here. Anything with a ``weight`` attribute works
    (WeightRecord rows, RecordResponse schemas).
    """
    if len(records) < 2:
        return TrendResult(
            trend=Trend.INSUFFICIENT_DATA,
            change=0.0,
            period_days=period_days,
            record_count=len(records),
        )

    newest, oldest = records[0], records[-1]
    change = to_decimal(newest.weight) - to_decimal(oldest.weight)

    return TrendResult(
        trend=classify_change(change),
        change=round1(change),
        period_days=period_days,
        record_count=len(records),
    )


def regression_line(records: Sequence) -> List[TrendLinePoint]:
    """Least squares line over the record index (0, 1, 2...), one point per record.

    Records are ordered oldest first. A single record gives a flat line.
    """
    n = len(records)
    if n == 0:
        return []
    weights = [to_decimal(r.weight) for r in records]
    if n == 1:
        return [TrendLinePoint(index=0, weight=float(weights[0]))]

    sum_x = Decimal(sum(range(n)))
    sum_y = sum(weights)
    sum_xy = sum(i * w for i, w in enumerate(weights))
    sum_xx = Decimal(sum(i * i for i in range(n)))

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n

    return [TrendLinePoint(index=i, weight=float(slope * i + intercept)) for i in range(n)]
