from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AppointmentStatus, ServiceType
from ..users.model import UserRef
from ..vehicles.model import VehicleRef


@dataclass(frozen=True)
class Appointment:
    """Kundentermin in der Werkstatt."""

    appointment_id: str
    customer_name: str
    date: datetime
    service_type: str
    status: AppointmentStatus
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    notes: Optional[str] = None
    vehicle: Optional[VehicleRef] = None
    created_by: Optional[UserRef] = None

    @property
    def service_label(self) -> str:
        try:
            return ServiceType(self.service_type).label
        except ValueError:
            return self.service_type

    @property
    def vehicle_label(self) -> str:
        return self.vehicle.label if self.vehicle else "Kein Fahrzeug"


@dataclass(frozen=True)
class CalendarEvent:
    event_id: str
    title: str
    start: datetime
    end: datetime
    color: str
    appointment: Appointment
