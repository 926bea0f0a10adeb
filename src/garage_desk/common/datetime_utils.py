from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

from ..core.constants import SALARY_PERIOD_DAY
from ..core.enums import FilterPeriod


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_time(value: str) -> time:
    return datetime.strptime(value, "%H:%M").time()


def parse_api_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO timestamp from the API into a naive local datetime.

    Timestamps with an offset (``Z`` or ``+02:00``) are converted to local time
    so pages show the shop's wall clock.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def to_api_datetime(value: datetime) -> str:
    """Serialize a datetime the way the API expects (UTC, ``Z`` suffix).

    Naive values are taken as local time.
    """
    if value.tzinfo is None:
        value = value.astimezone()
    as_utc = value.astimezone(timezone.utc).replace(tzinfo=None)
    return as_utc.isoformat(timespec="milliseconds") + "Z"


def period_range(period: FilterPeriod, today: date) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Start/end (inclusive) for a filter period; weeks start on Monday."""
    if period == FilterPeriod.ALL:
        return None, None

    if period == FilterPeriod.WEEK:
        start = today - timedelta(days=today.weekday())
        end = start + timedelta(days=6)
    elif period == FilterPeriod.MONTH:
        start = today.replace(day=1)
        end = _month_end(today)
    elif period == FilterPeriod.YEAR:
        start = date(today.year, 1, 1)
        end = date(today.year, 12, 31)
    else:
        return None, None

    return datetime.combine(start, time.min), datetime.combine(end, time.max)


def in_period(value: Optional[datetime], period: FilterPeriod, today: date) -> bool:
    start, end = period_range(period, today)
    if start is None or end is None:
        return True
    if value is None:
        return False
    return start <= value <= end


def salary_period(today: date) -> Tuple[date, date]:
    """Pay period runs from the 25th to the 25th."""
    if today.day >= SALARY_PERIOD_DAY:
        start = today.replace(day=SALARY_PERIOD_DAY)
        end = _shift_month(today, 1).replace(day=SALARY_PERIOD_DAY)
    else:
        start = _shift_month(today, -1).replace(day=SALARY_PERIOD_DAY)
        end = today.replace(day=SALARY_PERIOD_DAY)
    return start, end


def month_start(value: date, months_back: int = 0) -> date:
    return _shift_month(value, -months_back).replace(day=1)


def format_elapsed(delta: timedelta) -> str:
    total = max(int(delta.total_seconds()), 0)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_date_de(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime("%d.%m.%Y")


def _shift_month(value: date, months: int) -> date:
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    return date(year, month + 1, 1)


def _month_end(value: date) -> date:
    return _shift_month(value, 1) - timedelta(days=1)
