"""Список записей: поиск, фильтр по месяцу, сортировка, изменение веса, CSV"""
import csv
import io
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional, Sequence

from app.analytics.rounding import round1, to_decimal
from app.schemas import ChangeDirection, RecordListItem, RecordPeriod, RecordSort, WeightChange

# kg, strict comparison
CHANGE_THRESHOLD = Decimal('0.1')
CSV_HEADERS = ("date", "weight_kg", "memo")


def format_weight(weight) -> str:
    """60.0 -> '60', 58.5 -> '58.5'"""
    return f"{to_decimal(weight).normalize():f}"


def matches_search(record, term: str) -> bool:
    """Case-insensitive match on memo, weight or ISO date"""
    term = term.strip().lower()
    if not term:
        return True
    return (
        term in (record.memo or "").lower()
        or term in format_weight(record.weight)
        or term in record.date.isoformat()
    )


def month_bounds(today: date, months_back: int = 0):
    """First and last day of the month ``months_back`` months before ``today``"""
    first = today.replace(day=1)
    for _ in range(months_back):
        first = (first - timedelta(days=1)).replace(day=1)
    last = (first + timedelta(days=32)).replace(day=1) - timedelta(days=1)
    return first, last


def in_period(record, period: RecordPeriod, today: date) -> bool:
    if period == RecordPeriod.THIS_MONTH:
        first, _ = month_bounds(today)
        return record.date >= first
    if period == RecordPeriod.LAST_MONTH:
        first, last = month_bounds(today, 1)
        return first <= record.date <= last
    return True


def filter_records(records: Sequence, today: date, search: Optional[str] = None,
                   period: RecordPeriod = RecordPeriod.ALL) -> list:
    """Keeps the input order"""
    return [
        record for record in records
        if in_period(record, period, today) and (not search or matches_search(record, search))
    ]


def sort_records(records: Sequence, sort: RecordSort = RecordSort.LATEST) -> list:
    """Sort records given oldest first (date, created_at, id).

    Sorting is stable, so for latest the order is reversed instead of sorted
    descending: a later-created record on the same day stays newer.
    """
    if sort == RecordSort.LATEST:
        return list(reversed(sorted(records, key=lambda r: r.date)))
    if sort == RecordSort.OLDEST:
        return sorted(records, key=lambda r: r.date)
    if sort == RecordSort.HIGHEST:
        return sorted(records, key=lambda r: r.weight, reverse=True)
    return sorted(records, key=lambda r: r.weight)


def classify_weight_change(change: Decimal) -> ChangeDirection:
    if change > CHANGE_THRESHOLD:
        return ChangeDirection.INCREASE
    if change < -CHANGE_THRESHOLD:
        return ChangeDirection.DECREASE
    return ChangeDirection.STABLE


def with_changes(records: Sequence) -> List[RecordListItem]:
    """Each record compared with the one listed right after it, the last has no change"""
    items = []
    for i, record in enumerate(records):
        change = None
        if i + 1 < len(records):
            diff = to_decimal(record.weight) - to_decimal(records[i + 1].weight)
            change = WeightChange(value=round1(diff), direction=classify_weight_change(diff))
        item = RecordListItem.model_validate(record, from_attributes=True)
        item.change = change
        items.append(item)
    return items


def records_to_csv(records: Sequence) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in records:
        writer.writerow((record.date.isoformat(), format_weight(record.weight), record.memo or ""))
    return buffer.getvalue()
