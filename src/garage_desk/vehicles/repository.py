from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..common.uploads import Upload
from .model import Vehicle


class VehicleRepository(Protocol):
    def list_all(self) -> Sequence[Vehicle]:
        raise NotImplementedError

    def get_by_id(self, vehicle_id: str) -> Optional[Vehicle]:
        raise NotImplementedError

    def create(self, payload: dict[str, Any]) -> Vehicle:
        raise NotImplementedError

    def update(self, vehicle_id: str, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, vehicle_id: str) -> None:
        raise NotImplementedError

    def decode_vin(self, vin: str) -> dict[str, Any]:
        """Raw decoder answer for a 17 character VIN."""

        raise NotImplementedError

    def extract_from_document(self, document: Upload) -> dict[str, Any]:
        """OCR on a vehicle registration photo."""

        raise NotImplementedError

    def upload_photo(self, vehicle_id: str, photo: Upload, *, kind: str) -> None:
        raise NotImplementedError
