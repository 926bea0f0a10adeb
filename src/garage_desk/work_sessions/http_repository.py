from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..common.datetime_utils import parse_api_datetime, to_api_datetime
from ..core.exceptions import NotFoundError
from ..users.http_repository import to_user_ref
from .model import WorkSession
from .repository import WorkSessionRepository


def to_work_session(r: dict[str, Any]) -> WorkSession:
    hours = r.get("hours")
    return WorkSession(
        session_id=str(r["id"]),
        check_in=parse_api_datetime(r["checkIn"]),
        check_out=parse_api_datetime(r.get("checkOut")),
        hours=float(hours) if hours is not None else None,
        user=to_user_ref(r.get("user")),
    )


class HttpWorkSessionRepository(WorkSessionRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def get_active(self) -> Optional[WorkSession]:
        try:
            r = self._client.get("/work-sessions/active")
        except NotFoundError:
            return None
        return to_work_session(r) if r else None

    def check_in(self) -> WorkSession:
        return to_work_session(self._client.post("/work-sessions/check-in"))

    def check_out(self) -> WorkSession:
        return to_work_session(self._client.post("/work-sessions/check-out"))

    def list_for_user(self, user_id: str) -> Sequence[WorkSession]:
        rows = self._client.get("/work-sessions", params={"userId": user_id}) or []
        return [to_work_session(r) for r in rows]

    def create_manual(self, *, check_in: datetime, check_out: datetime) -> WorkSession:
        body = {"checkIn": to_api_datetime(check_in), "checkOut": to_api_datetime(check_out)}
        return to_work_session(self._client.post("/work-sessions/manual", body))
