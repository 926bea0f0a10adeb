from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..users.model import UserRef
from ..vehicles.model import VehicleRef


@dataclass(frozen=True)
class TimeLog:
    """Stunden, die ein Mitarbeiter auf ein Fahrzeug gebucht hat."""

    log_id: str
    hours: float
    created_at: Optional[datetime]
    date: Optional[datetime] = None
    notes: Optional[str] = None
    vehicle: Optional[VehicleRef] = None
    user: Optional[UserRef] = None
