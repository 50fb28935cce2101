from __future__ import annotations

from datetime import date, datetime, time, timedelta


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` range of local datetimes covering ``day``."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def add_months(base: date, months: int) -> date:
    year = base.year + (base.month - 1 + months) // 12
    month = (base.month - 1 + months) % 12 + 1
    day = min(base.day, _days_in_month(year, month))
    return date(year, month, day)


def _days_in_month(year: int, month: int) -> int:
    if month == 12:
        next_month = date(year + 1, 1, 1)
    else:
        next_month = date(year, month + 1, 1)
    return (next_month - timedelta(days=1)).day
