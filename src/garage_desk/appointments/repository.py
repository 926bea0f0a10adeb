from __future__ import annotations

from typing import Any, Protocol, Sequence

from .model import Appointment


class AppointmentRepository(Protocol):
    def list_all(self) -> Sequence[Appointment]:
        raise NotImplementedError

    def create(self, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    def update(self, appointment_id: str, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, appointment_id: str) -> None:
        raise NotImplementedError
