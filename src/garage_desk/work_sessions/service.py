from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.calendar_grid import CalendarMonth, build_month
from ..common.datetime_utils import format_elapsed, in_period, parse_iso_date, parse_time
from ..core.enums import FilterPeriod
from ..core.exceptions import ValidationError
from .model import WorkSession
from .repository import WorkSessionRepository


@dataclass(frozen=True)
class ManualBlock:
    check_in: datetime
    check_out: datetime

    @property
    def hours(self) -> float:
        return round((self.check_out - self.check_in).total_seconds() / 3600, 2)


@dataclass(frozen=True)
class ScanResult:
    action: str
    message: str


def hours_css(hours: float) -> str:
    if hours >= 8:
        return "bg-success"
    if hours >= 4:
        return "bg-warning text-dark"
    return "bg-info text-dark"


class WorkSessionService:
    def __init__(self, sessions: WorkSessionRepository):
        self._sessions = sessions

    def get_active(self) -> Optional[WorkSession]:
        session = self._sessions.get_active()
        if session and not session.is_open:
            return None
        return session

    def check_in(self) -> WorkSession:
        if self.get_active():
            raise ValidationError("Sie sind bereits eingecheckt")
        return self._sessions.check_in()

    def check_out(self) -> WorkSession:
        if not self.get_active():
            raise ValidationError("Sie sind nicht eingecheckt")
        return self._sessions.check_out()

    def toggle(self) -> ScanResult:
        """Check out when a session is open, otherwise check in (QR scan)."""
        if self.get_active():
            closed = self._sessions.check_out()
            return ScanResult(action="check_out", message=f"Ausgecheckt! {closed.hours or 0:.2f}h erfasst.")
        self._sessions.check_in()
        return ScanResult(action="check_in", message="Eingecheckt!")

    def elapsed(self, session: Optional[WorkSession], *, now: Optional[datetime] = None) -> str:
        if not session or not session.is_open:
            return "00:00:00"
        now = now or datetime.now()
        return format_elapsed(now - session.check_in)

    def history(self, user_id: str, *, period: FilterPeriod = FilterPeriod.ALL, today: Optional[date] = None) -> list[WorkSession]:
        today = today or date.today()
        rows = [s for s in self._sessions.list_for_user(user_id) if in_period(s.check_in, period, today)]
        rows.sort(key=lambda s: s.check_in, reverse=True)
        return rows

    def history_ui(self, user_id: str, *, period: FilterPeriod = FilterPeriod.ALL, today: Optional[date] = None) -> dict:
        rows = self.history(user_id, period=period, today=today)
        total = sum(s.hours or 0 for s in rows)
        return {
            "rows": [self._to_ui(s) for s in rows],
            "total_hours": f"{total:.2f}",
            "count": len(rows),
        }

    @staticmethod
    def parse_block(work_date: date, start: str, end: str, label: str) -> ManualBlock:
        try:
            check_in = datetime.combine(work_date, parse_time(start))
            check_out = datetime.combine(work_date, parse_time(end))
        except ValueError:
            raise ValidationError(f"Ungültige Zeitangaben für {label}")
        if check_out <= check_in:
            raise ValidationError(f"{label} Endzeit muss nach der Startzeit liegen")
        return ManualBlock(check_in=check_in, check_out=check_out)

    def record_manual(
        self,
        *,
        work_date: str,
        block1_start: str,
        block1_end: str,
        block2_start: str = "",
        block2_end: str = "",
    ) -> list[ManualBlock]:
        """Record up to two worked blocks for one day. Block 2 is optional."""
        if not block1_start or not block1_end:
            raise ValidationError("Bitte Block 1 Start- und Endzeit angeben")
        try:
            day = parse_iso_date(work_date)
        except (TypeError, ValueError):
            raise ValidationError("Ungültiges Datum")

        blocks = [self.parse_block(day, block1_start, block1_end, "Block 1")]
        if block2_start and block2_end:
            blocks.append(self.parse_block(day, block2_start, block2_end, "Block 2"))

        for block in blocks:
            self._sessions.create_manual(check_in=block.check_in, check_out=block.check_out)
        return blocks

    def calendar(self, user_id: str, *, year: int, month: int) -> CalendarMonth[WorkSession]:
        # Open sessions have no hours yet; only completed ones are shown.
        completed = [s for s in self._sessions.list_for_user(user_id) if not s.is_open]
        return build_month(year, month, completed, lambda s: s.check_in.date())

    def sessions_on(self, user_id: str, day: date) -> list[WorkSession]:
        rows = [s for s in self._sessions.list_for_user(user_id) if s.check_in.date() == day]
        rows.sort(key=lambda s: s.check_in)
        return rows

    @staticmethod
    def day_hours(sessions: Sequence[WorkSession]) -> float:
        return round(sum(s.hours or 0 for s in sessions), 2)

    def _to_ui(self, s: WorkSession) -> dict:
        hours = s.hours or 0
        return {
            "id": s.session_id,
            "date": s.check_in.strftime("%d.%m.%Y"),
            "check_in": s.check_in.strftime("%H:%M"),
            "check_out": s.check_out.strftime("%H:%M") if s.check_out else "-",
            "hours": f"{hours:.2f}" if s.check_out else "-",
            "css_class": hours_css(hours) if s.check_out else "bg-secondary",
        }
