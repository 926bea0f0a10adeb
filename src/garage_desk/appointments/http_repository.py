from __future__ import annotations

from typing import Any, Sequence

from ..api.client import ApiClient
from ..common.datetime_utils import parse_api_datetime
from ..core.enums import AppointmentStatus
from ..users.http_repository import to_user_ref
from ..vehicles.http_repository import to_vehicle_ref
from .model import Appointment
from .repository import AppointmentRepository


def to_appointment(r: dict[str, Any]) -> Appointment:
    try:
        status = AppointmentStatus(r.get("status"))
    except ValueError:
        status = AppointmentStatus.PENDING
    return Appointment(
        appointment_id=str(r["id"]),
        customer_name=r.get("customerName") or "",
        date=parse_api_datetime(r.get("date")),
        service_type=r.get("serviceType") or "",
        status=status,
        customer_phone=r.get("customerPhone"),
        customer_email=r.get("customerEmail"),
        notes=r.get("notes"),
        vehicle=to_vehicle_ref(r.get("vehicle")),
        created_by=to_user_ref(r.get("createdBy")),
    )


class HttpAppointmentRepository(AppointmentRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_all(self) -> Sequence[Appointment]:
        rows = self._client.get("/appointments") or []
        # Entries without a date cannot be placed on the calendar.
        return [to_appointment(r) for r in rows if r.get("date")]

    def create(self, payload: dict[str, Any]) -> None:
        self._client.post("/appointments", payload)

    def update(self, appointment_id: str, payload: dict[str, Any]) -> None:
        self._client.patch(f"/appointments/{appointment_id}", payload)

    def delete(self, appointment_id: str) -> None:
        self._client.delete(f"/appointments/{appointment_id}")
