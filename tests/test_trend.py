"""Тесты анализа тренда"""
from datetime import date
from types import SimpleNamespace

import pytest

from app.analytics import analyze_trend, regression_line
from app.analytics.rounding import round1
from app.schemas import Trend


def records(*weights):
    """Newest first, one record per day going back"""
    return [SimpleNamespace(date=date(2024, 7, 25 - i), weight=w) for i, w in enumerate(weights)]


@pytest.mark.parametrize("rows", [[], records(60.0)])
def test_insufficient_data(rows):
    result = analyze_trend(rows, 30)

    assert result.trend == Trend.INSUFFICIENT_DATA
    assert result.change == 0
    assert result.period_days == 30
    assert result.record_count == len(rows)


@pytest.mark.parametrize("newest, oldest, expected", [
    (70.5, 70.0, Trend.STABLE),
    (69.5, 70.0, Trend.STABLE),
    (60.7, 60.2, Trend.STABLE),
    (70.51, 70.0, Trend.INCREASING),
    (69.49, 70.0, Trend.DECREASING),
    (72.0, 70.0, Trend.INCREASING),
    (58.5, 60.2, Trend.DECREASING),
    (70.0, 70.0, Trend.STABLE),
])
def test_classification_thresholds_are_strict(newest, oldest, expected):
    assert analyze_trend(records(newest, oldest), 30).trend == expected


def test_change_uses_first_and_last_record_only():
    result = analyze_trend(records(61.0, 75.0, 40.0, 60.0), 14)

    assert result.trend == Trend.INCREASING
    assert result.change == 1.0
    assert result.record_count == 4
    assert result.period_days == 14


def test_change_is_rounded_to_one_decimal():
    result = analyze_trend(records(58.5, 60.2), 30)

    assert result.change == -1.7
    assert analyze_trend(records(70.51, 70.0), 30).change == 0.5


def test_round_half_away_from_zero():
    assert round1(0.25) == 0.3
    assert round1(-0.25) == -0.3
    assert round1(53.125) == 53.1
    assert round1(-1.7000000000000028) == -1.7


def test_regression_line_fits_points():
    rows = [SimpleNamespace(date=date(2024, 7, 1 + i), weight=w) for i, w in enumerate([60.0, 61.0, 59.0, 62.0])]

    line = regression_line(rows)

    assert [p.index for p in line] == [0, 1, 2, 3]
    # y = 0.4x + 59.9
    assert [p.weight for p in line] == pytest.approx([59.9, 60.3, 60.7, 61.1])


def test_regression_line_on_a_straight_line():
    rows = list(reversed(records(58.0, 59.0, 60.0)))
    assert [p.weight for p in regression_line(rows)] == pytest.approx([60.0, 59.0, 58.0])


def test_regression_line_short_inputs():
    assert regression_line([]) == []
    assert [p.weight for p in regression_line(records(60.2))] == [60.2]
