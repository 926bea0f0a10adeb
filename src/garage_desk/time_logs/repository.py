from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import TimeLog


class TimeLogRepository(Protocol):
    def list(self, *, vehicle_id: Optional[str] = None) -> Sequence[TimeLog]:
        raise NotImplementedError

    def create(self, *, vehicle_id: str, hours: float, notes: Optional[str] = None) -> TimeLog:
        raise NotImplementedError

    def total_hours(self, vehicle_id: str) -> float:
        raise NotImplementedError
