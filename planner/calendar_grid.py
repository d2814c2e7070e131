"""
Month grid for the calendar view.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

GRID_DAYS = 42  # six Sunday-first weeks


@dataclass(frozen=True)
class CalendarDay:
    date: date
    in_month: bool
    is_today: bool
    before_min_date: bool

    @property
    def clickable(self) -> bool:
        return self.in_month and not self.before_min_date


def grid_start(year: int, month: int) -> date:
    """Sunday on or before the first day of the month."""
    first = date(year, month, 1)
    # date.weekday() is Monday=0 .. Sunday=6
    return first - timedelta(days=(first.weekday() + 1) % 7)


def month_grid(
    year: int,
    month: int,
    *,
    today: Optional[date] = None,
    min_date: Optional[date] = None,
) -> list[CalendarDay]:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    today = today or date.today()
    start = grid_start(year, month)
    days = []
    for offset in range(GRID_DAYS):
        day = start + timedelta(days=offset)
        days.append(
            CalendarDay(
                date=day,
                in_month=day.month == month,
                is_today=day == today,
                before_min_date=min_date is not None and day < min_date,
            )
        )
    return days
