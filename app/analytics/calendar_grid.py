"""Сетка календаря на месяц: всегда 6 недель по 7 дней"""
from datetime import date, timedelta
from typing import Dict, Iterable, List

from app.schemas import CalendarDay, RecordResponse
from app.utils.error_handler import ValidationError

GRID_SIZE = 42


def build_month_grid(year: int, month: int, week_starts_on_sunday: bool = True) -> List[date]:
    """42 consecutive dates starting at the week start on or before the 1st"""
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}. Must be 1-12", field="month")
    try:
        first = date(year, month, 1)
        # date.weekday(): Monday == 0
        if week_starts_on_sunday:
            offset = (first.weekday() + 1) % 7
        else:
            offset = first.weekday()

        start = first - timedelta(days=offset)
        return [start + timedelta(days=i) for i in range(GRID_SIZE)]
    except (ValueError, OverflowError) as e:
        # year outside 1..9999, or the grid runs past date.min / date.max
        raise ValidationError(f"Invalid year: {year}", field="year") from e


def is_in_month(cell: date, year: int, month: int) -> bool:
    return cell.year == year and cell.month == month


def is_today(cell: date, today: date) -> bool:
    return cell == today


def latest_per_day(records: Iterable) -> Dict[date, object]:
    """Последняя запись на каждый день.

    records в порядке range_ascending (date, created_at, id), поэтому из
    нескольких записей за день побеждает последняя.
    """
    by_day = {}
    for record in records:
        by_day[record.date] = record
    return by_day


def project_records(grid: List[date], records: Iterable, year: int, month: int, today: date) -> List[CalendarDay]:
    """Раскладывает записи месяца по ячейкам сетки"""
    by_day = latest_per_day(records)
    days = []
    for cell in grid:
        in_month = is_in_month(cell, year, month)
        record = by_day.get(cell) if in_month else None
        days.append(CalendarDay(
            date=cell,
            in_month=in_month,
            is_today=is_today(cell, today),
            record=RecordResponse.model_validate(record) if record is not None else None,
        ))
    return days
