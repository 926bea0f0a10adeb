from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from ..common.uploads import Upload
from ..common.validators import blank_to_none, parse_int, require_vin
from ..core.constants import VIN_LENGTH
from ..core.enums import ServiceType, VehicleStatus
from ..core.exceptions import ApiError, ValidationError
from .model import Vehicle
from .repository import VehicleRepository

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    "brand",
    "model",
    "trim",
    "style",
    "bodyType",
    "engine",
    "transmission",
    "drive",
    "manufacturer",
    "origin",
    "licensePlate",
    "workDescription",
    "serviceType",
    "color",
    "customerName",
    "customerEmail",
    "customerPhone",
)
INT_FIELDS = ("year", "mileage")

# Field label shown after OCR recognised it.
EXTRACTED_FIELDS = {
    "vin": "VIN",
    "customerName": "Kundenname",
    "brand": "Marke",
    "model": "Modell",
    "year": "Jahr",
    "color": "Farbe",
    "licensePlate": "Kennzeichen",
}


@dataclass
class DecodedVehicle:
    """Form values filled in from the VIN decoder or document OCR."""

    form: dict[str, str]
    image_url: Optional[str] = None
    recognized: list[str] = field(default_factory=list)


def _first(*values) -> Optional[Any]:
    for v in values:
        if v not in (None, ""):
            return v
    return None


def _decoded_fields(data: Mapping[str, Any]) -> dict[str, Optional[Any]]:
    nested = data.get("vehicle") or {}
    year = _first(nested.get("year"), data.get("year"))
    return {
        "brand": _first(nested.get("make"), data.get("make")),
        "model": _first(nested.get("model"), data.get("model")),
        "year": str(year) if year is not None else None,
        "color": data.get("color"),
        "trim": data.get("trim"),
        "style": data.get("style"),
        "bodyType": _first(data.get("body"), data.get("bodyType")),
        "engine": data.get("engine"),
        "transmission": data.get("transmission"),
        "drive": data.get("drive"),
        "manufacturer": _first(nested.get("manufacturer"), data.get("manufacturer")),
        "origin": data.get("origin"),
    }


def _decoded_image(data: Mapping[str, Any]) -> Optional[str]:
    for key in ("images", "photos"):
        items = data.get(key)
        if isinstance(items, list) and items:
            return items[0]
    if data.get("image"):
        return data["image"]
    media = data.get("media") or {}
    images = media.get("images") or []
    return images[0] if images else None


def merge_decoded(form: Mapping[str, str], data: Mapping[str, Any], *, overwrite: bool = True) -> DecodedVehicle:
    """Merge a decoder answer into form values.

    With ``overwrite`` the decoder wins where it has a value; without it only
    empty form fields are filled.
    """
    merged = dict(form)
    for key, value in _decoded_fields(data).items():
        if value in (None, ""):
            continue
        if overwrite or not merged.get(key):
            merged[key] = str(value)
    return DecodedVehicle(form=merged, image_url=_decoded_image(data))


def build_vehicle_payload(form: Mapping[str, str], *, require_service_type: bool) -> dict[str, Any]:
    vin = (form.get("vin") or "").strip()
    service_type = (form.get("serviceType") or "").strip()
    if not vin or (require_service_type and not service_type):
        raise ValidationError("Bitte füllen Sie alle Pflichtfelder aus")

    payload: dict[str, Any] = {"vin": require_vin(vin)}
    for key in TEXT_FIELDS:
        payload[key] = blank_to_none(form.get(key))
    for key in INT_FIELDS:
        payload[key] = parse_int(form.get(key))

    if payload["serviceType"]:
        try:
            ServiceType(payload["serviceType"])
        except ValueError:
            raise ValidationError("Ungültiger Service-Typ")
    return payload


class VehicleService:
    """Use cases: vehicle intake, editing and lookups."""

    def __init__(self, vehicles: VehicleRepository):
        self._vehicles = vehicles

    def list(self, *, active_only: bool = False) -> Sequence[Vehicle]:
        items = list(self._vehicles.list_all())
        if active_only:
            items = [v for v in items if v.is_active]
        return items

    def get(self, vehicle_id: str) -> Vehicle:
        vehicle = self._vehicles.get_by_id(vehicle_id)
        if not vehicle:
            raise ValidationError("Fahrzeug nicht gefunden")
        return vehicle

    def decode_vin(self, vin: str, form: Optional[Mapping[str, str]] = None) -> DecodedVehicle:
        vin = require_vin(vin)
        data = self._vehicles.decode_vin(vin)
        result = merge_decoded({**(form or {}), "vin": vin}, data, overwrite=True)
        return result

    def extract_from_document(self, document: Optional[Upload], form: Optional[Mapping[str, str]] = None) -> DecodedVehicle:
        if document is None:
            raise ValidationError("Bitte laden Sie zuerst ein Foto des Fahrzeugausweises hoch")

        data = self._vehicles.extract_from_document(document)
        merged = dict(form or {})
        recognized = []
        for key, label in EXTRACTED_FIELDS.items():
            value = data.get(key)
            if value in (None, ""):
                continue
            merged[key] = str(value)
            recognized.append(label)

        if not recognized:
            raise ValidationError("Daten konnten nicht automatisch erkannt werden. Bitte manuell eingeben.")

        result = DecodedVehicle(form=merged, recognized=recognized)
        vin = merged.get("vin") or ""
        if len(vin) == VIN_LENGTH and (not data.get("brand") or not data.get("model")):
            try:
                decoded = merge_decoded(merged, self._vehicles.decode_vin(vin), overwrite=False)
                result = DecodedVehicle(form=decoded.form, image_url=decoded.image_url, recognized=recognized)
            except ApiError as e:
                logger.info("VIN decode after OCR failed for %s: %s", vin, e)
        return result

    def create(
        self,
        form: Mapping[str, str],
        *,
        vehicle_photo: Optional[Upload] = None,
        document_photo: Optional[Upload] = None,
    ) -> Vehicle:
        payload = build_vehicle_payload(form, require_service_type=True)
        status = form.get("status") or VehicleStatus.ON_HOLD.value
        if status not in (VehicleStatus.ON_HOLD.value, VehicleStatus.ACTIVE.value):
            raise ValidationError("Ungültiger Fahrzeugstatus")
        payload["status"] = status
        payload["isActive"] = True

        vehicle = self._vehicles.create(payload)
        if vehicle_photo:
            self._vehicles.upload_photo(vehicle.vehicle_id, vehicle_photo, kind="vehicle")
        if document_photo:
            self._vehicles.upload_photo(vehicle.vehicle_id, document_photo, kind="document")
        return vehicle

    def update(self, vehicle_id: str, form: Mapping[str, str]) -> None:
        payload = build_vehicle_payload(form, require_service_type=False)
        self._vehicles.update(vehicle_id, payload)

    def set_status(self, vehicle_id: str, status: str) -> None:
        try:
            new_status = VehicleStatus(status)
        except ValueError:
            raise ValidationError("Ungültiger Fahrzeugstatus")
        self._vehicles.update(
            vehicle_id,
            {"status": new_status.value, "isActive": new_status != VehicleStatus.COMPLETED},
        )

    def delete(self, vehicle_id: str) -> None:
        self._vehicles.delete(vehicle_id)
