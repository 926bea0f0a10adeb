from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..common.datetime_utils import parse_api_datetime
from ..users.http_repository import to_user_ref
from ..vehicles.http_repository import to_vehicle_ref
from .model import TimeLog
from .repository import TimeLogRepository


def to_time_log(r: dict[str, Any]) -> TimeLog:
    return TimeLog(
        log_id=str(r["id"]),
        hours=float(r.get("hours") or 0),
        created_at=parse_api_datetime(r.get("createdAt")),
        date=parse_api_datetime(r.get("date")),
        notes=r.get("notes"),
        vehicle=to_vehicle_ref(r.get("vehicle")),
        user=to_user_ref(r.get("user")),
    )


class HttpTimeLogRepository(TimeLogRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list(self, *, vehicle_id: Optional[str] = None) -> Sequence[TimeLog]:
        rows = self._client.get("/time-logs", params={"vehicleId": vehicle_id}) or []
        return [to_time_log(r) for r in rows]

    def create(self, *, vehicle_id: str, hours: float, notes: Optional[str] = None) -> TimeLog:
        r = self._client.post("/time-logs", {"vehicleId": vehicle_id, "hours": hours, "notes": notes})
        return to_time_log(r)

    def total_hours(self, vehicle_id: str) -> float:
        data = self._client.get("/time-logs/total/hours", params={"vehicleId": vehicle_id}) or {}
        return float(data.get("totalHours") or 0)
