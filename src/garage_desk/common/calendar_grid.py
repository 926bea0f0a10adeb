from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Callable, Generic, Sequence, TypeVar

T = TypeVar("T")

MONTH_NAMES_DE = (
    "Januar",
    "Februar",
    "März",
    "April",
    "Mai",
    "Juni",
    "Juli",
    "August",
    "September",
    "Oktober",
    "November",
    "Dezember",
)
WEEKDAYS_DE = ("Mo", "Di", "Mi", "Do", "Fr", "Sa", "So")


@dataclass(frozen=True)
class CalendarDay(Generic[T]):
    day: date
    in_month: bool
    items: Sequence[T]


@dataclass(frozen=True)
class CalendarMonth(Generic[T]):
    year: int
    month: int
    weeks: Sequence[Sequence[CalendarDay[T]]]

    @property
    def title(self) -> str:
        return f"{MONTH_NAMES_DE[self.month - 1]} {self.year}"

    @property
    def prev(self) -> tuple[int, int]:
        return (self.year - 1, 12) if self.month == 1 else (self.year, self.month - 1)

    @property
    def next(self) -> tuple[int, int]:
        return (self.year + 1, 1) if self.month == 12 else (self.year, self.month + 1)


def build_month(year: int, month: int, items: Sequence[T], day_of: Callable[[T], date]) -> CalendarMonth[T]:
    """Month grid with weeks starting on Monday, items bucketed per day."""
    by_day: dict[date, list[T]] = {}
    for item in items:
        by_day.setdefault(day_of(item), []).append(item)

    weeks = []
    for week in calendar.Calendar(firstweekday=0).monthdatescalendar(year, month):
        weeks.append([CalendarDay(day=d, in_month=d.month == month, items=by_day.get(d, [])) for d in week])
    return CalendarMonth(year=year, month=month, weeks=weeks)
