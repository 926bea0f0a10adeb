from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Mapping, Optional, Sequence

from ..common.calendar_grid import CalendarMonth, build_month
from ..common.datetime_utils import parse_iso_date, parse_time, to_api_datetime
from ..common.validators import blank_to_none
from ..core.constants import APPOINTMENT_DURATION_MINUTES
from ..core.enums import AppointmentStatus, ServiceType
from ..core.exceptions import ValidationError
from .model import Appointment, CalendarEvent
from .repository import AppointmentRepository

STATUS_COLORS = {
    AppointmentStatus.PENDING: "#f59e0b",
    AppointmentStatus.CONFIRMED: "#10b981",
    AppointmentStatus.CANCELLED: "#ef4444",
    AppointmentStatus.COMPLETED: "#3b82f6",
}
DEFAULT_COLOR = "#6b7280"

STATUS_LABELS = {
    AppointmentStatus.PENDING: "Ausstehend",
    AppointmentStatus.CONFIRMED: "Bestätigt",
    AppointmentStatus.CANCELLED: "Abgesagt",
    AppointmentStatus.COMPLETED: "Abgeschlossen",
}

DEFAULT_TIME = "09:00"


class AppointmentService:
    def __init__(self, appointments: AppointmentRepository):
        self._appointments = appointments

    def list(self) -> Sequence[Appointment]:
        return self._appointments.list_all()

    def events(
        self,
        appointments: Sequence[Appointment],
        *,
        status: str = "all",
        vehicle_id: str = "all",
    ) -> list[CalendarEvent]:
        out = []
        for apt in appointments:
            if status != "all" and apt.status.value != status:
                continue
            if vehicle_id != "all" and (not apt.vehicle or apt.vehicle.vehicle_id != vehicle_id):
                continue
            out.append(
                CalendarEvent(
                    event_id=apt.appointment_id,
                    title=f"{apt.customer_name} - {apt.service_label}",
                    start=apt.date,
                    end=apt.date + timedelta(minutes=APPOINTMENT_DURATION_MINUTES),
                    color=STATUS_COLORS.get(apt.status, DEFAULT_COLOR),
                    appointment=apt,
                )
            )
        out.sort(key=lambda e: e.start)
        return out

    @staticmethod
    def for_day(appointments: Sequence[Appointment], day: date) -> list[Appointment]:
        rows = [a for a in appointments if a.date.date() == day]
        rows.sort(key=lambda a: a.date)
        return rows

    @staticmethod
    def count_by_status(appointments: Sequence[Appointment]) -> dict[AppointmentStatus, int]:
        counts = {s: 0 for s in AppointmentStatus}
        for a in appointments:
            counts[a.status] += 1
        return counts

    def month(self, events: Sequence[CalendarEvent], *, year: int, month: int) -> CalendarMonth[CalendarEvent]:
        return build_month(year, month, events, lambda e: e.start.date())

    @staticmethod
    def build_payload(form: Mapping[str, str]) -> dict:
        customer_name = (form.get("customerName") or "").strip()
        if not customer_name:
            raise ValidationError("Bitte geben Sie einen Kundennamen ein")

        try:
            day = parse_iso_date((form.get("date") or "").strip())
            at = parse_time((form.get("time") or DEFAULT_TIME).strip())
        except ValueError:
            raise ValidationError("Ungültiges Datum oder Uhrzeit")

        service_type = form.get("serviceType") or ServiceType.SMALL_SERVICE.value
        try:
            ServiceType(service_type)
            status = AppointmentStatus(form.get("status") or AppointmentStatus.PENDING.value)
        except ValueError:
            raise ValidationError("Ungültiger Service-Typ oder Status")

        return {
            "customerName": customer_name,
            "customerPhone": blank_to_none(form.get("customerPhone")),
            "customerEmail": blank_to_none(form.get("customerEmail")),
            "serviceType": service_type,
            "status": status.value,
            "notes": blank_to_none(form.get("notes")),
            "vehicleId": blank_to_none(form.get("vehicleId")),
            "date": to_api_datetime(datetime.combine(day, at)),
        }

    def save(self, form: Mapping[str, str], appointment_id: Optional[str] = None) -> None:
        payload = self.build_payload(form)
        if appointment_id:
            self._appointments.update(appointment_id, payload)
        else:
            self._appointments.create(payload)

    def delete(self, appointment_id: str) -> None:
        self._appointments.delete(appointment_id)
