from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..common.datetime_utils import parse_api_datetime
from ..common.uploads import Upload
from ..core.enums import VehicleStatus
from ..core.exceptions import NotFoundError
from .model import Vehicle, VehicleRef
from .repository import VehicleRepository


def _int_or_none(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _status(value: Optional[str]) -> Optional[VehicleStatus]:
    try:
        return VehicleStatus(value) if value else None
    except ValueError:
        return None


def to_vehicle(r: dict[str, Any]) -> Vehicle:
    return Vehicle(
        vehicle_id=str(r["id"]),
        vin=r.get("vin") or "",
        is_active=r.get("isActive", True) is not False,
        created_at=parse_api_datetime(r.get("createdAt")),
        brand=r.get("brand"),
        model=r.get("model"),
        year=_int_or_none(r.get("year")),
        trim=r.get("trim"),
        style=r.get("style"),
        body_type=r.get("bodyType"),
        engine=r.get("engine"),
        transmission=r.get("transmission"),
        drive=r.get("drive"),
        manufacturer=r.get("manufacturer"),
        origin=r.get("origin"),
        license_plate=r.get("licensePlate"),
        work_description=r.get("workDescription"),
        service_type=r.get("serviceType"),
        color=r.get("color"),
        mileage=_int_or_none(r.get("mileage")),
        customer_name=r.get("customerName"),
        customer_email=r.get("customerEmail"),
        customer_phone=r.get("customerPhone"),
        status=_status(r.get("status")),
        updated_at=parse_api_datetime(r.get("updatedAt")),
    )


def to_vehicle_ref(r: Optional[dict[str, Any]]) -> Optional[VehicleRef]:
    if not r:
        return None
    return VehicleRef(
        vehicle_id=str(r.get("id", "")),
        vin=r.get("vin") or "",
        brand=r.get("brand"),
        model=r.get("model"),
    )


class HttpVehicleRepository(VehicleRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_all(self) -> Sequence[Vehicle]:
        return [to_vehicle(r) for r in self._client.get("/vehicles") or []]

    def get_by_id(self, vehicle_id: str) -> Optional[Vehicle]:
        try:
            r = self._client.get(f"/vehicles/{vehicle_id}")
        except NotFoundError:
            return None
        return to_vehicle(r) if r else None

    def create(self, payload: dict[str, Any]) -> Vehicle:
        return to_vehicle(self._client.post("/vehicles", payload))

    def update(self, vehicle_id: str, payload: dict[str, Any]) -> None:
        self._client.patch(f"/vehicles/{vehicle_id}", payload)

    def delete(self, vehicle_id: str) -> None:
        self._client.delete(f"/vehicles/{vehicle_id}")

    def decode_vin(self, vin: str) -> dict[str, Any]:
        return self._client.get(f"/vehicles/decode/{vin}") or {}

    def extract_from_document(self, document: Upload) -> dict[str, Any]:
        return self._client.post("/vehicles/extract-vin", files={"file": document.as_multipart()}) or {}

    def upload_photo(self, vehicle_id: str, photo: Upload, *, kind: str) -> None:
        self._client.post(
            f"/vehicles/{vehicle_id}/upload-photo",
            files={"file": photo.as_multipart()},
            data={"type": kind},
        )
