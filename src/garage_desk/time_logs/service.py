from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import blank_to_none, require_positive
from ..core.exceptions import ValidationError
from .model import TimeLog
from .repository import TimeLogRepository


class TimeLogService:
    def __init__(self, time_logs: TimeLogRepository):
        self._time_logs = time_logs

    def log_hours(self, *, vehicle_id: Optional[str], hours, notes: Optional[str] = None) -> TimeLog:
        if not vehicle_id:
            raise ValidationError("Bitte wählen Sie ein Fahrzeug aus")
        value = require_positive(hours, "Bitte geben Sie eine gültige Anzahl Stunden ein")
        return self._time_logs.create(vehicle_id=vehicle_id, hours=value, notes=blank_to_none(notes))

    def list(self, *, vehicle_id: Optional[str] = None) -> Sequence[TimeLog]:
        return self._time_logs.list(vehicle_id=vehicle_id)

    def total_hours(self, vehicle_id: str) -> float:
        return self._time_logs.total_hours(vehicle_id)

    @staticmethod
    def group_by_user(logs: Sequence[TimeLog]) -> list[dict]:
        """Per-worker totals, biggest first."""
        groups: dict[str, dict] = {}
        for log in logs:
            key = log.user.user_id if log.user else ""
            g = groups.get(key)
            if not g:
                g = {"user": log.user, "total_hours": 0.0, "logs": []}
                groups[key] = g
            g["total_hours"] += log.hours
            g["logs"].append(log)

        out = list(groups.values())
        out.sort(key=lambda g: g["total_hours"], reverse=True)
        return out
