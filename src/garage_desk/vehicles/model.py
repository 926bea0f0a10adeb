from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ServiceType, VehicleStatus


def vehicle_label(brand: Optional[str], model: Optional[str], vin: str) -> str:
    if brand and model:
        return f"{brand} {model}"
    return vin


@dataclass(frozen=True)
class Vehicle:
    """Fahrzeug in der Werkstatt (Auftrag)."""

    vehicle_id: str
    vin: str
    is_active: bool
    created_at: Optional[datetime]
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    trim: Optional[str] = None
    style: Optional[str] = None
    body_type: Optional[str] = None
    engine: Optional[str] = None
    transmission: Optional[str] = None
    drive: Optional[str] = None
    manufacturer: Optional[str] = None
    origin: Optional[str] = None
    license_plate: Optional[str] = None
    work_description: Optional[str] = None
    service_type: Optional[str] = None
    color: Optional[str] = None
    mileage: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    status: Optional[VehicleStatus] = None
    updated_at: Optional[datetime] = None

    @property
    def label(self) -> str:
        return vehicle_label(self.brand, self.model, self.vin)

    @property
    def service_label(self) -> str:
        if not self.service_type:
            return "-"
        try:
            return ServiceType(self.service_type).label
        except ValueError:
            return self.service_type


@dataclass(frozen=True)
class VehicleRef:
    """Short vehicle embedded in invoices, time logs and expenses."""

    vehicle_id: str
    vin: str
    brand: Optional[str] = None
    model: Optional[str] = None

    @property
    def label(self) -> str:
        return vehicle_label(self.brand, self.model, self.vin)
