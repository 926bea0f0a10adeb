from __future__ import annotations

from datetime import datetime

import pytest

from garage_desk.common.uploads import Upload
from garage_desk.core.exceptions import ApiError, ValidationError
from garage_desk.vehicles.model import Vehicle
from garage_desk.vehicles.service import VehicleService, build_vehicle_payload, merge_decoded

VIN = "WVWZZZ1KZAW000001"


class FakeVehiclesRepo:
    def __init__(self, decoded=None, extracted=None, decode_error=None):
        self.decoded = decoded or {}
        self.extracted = extracted or {}
        self.decode_error = decode_error
        self.created: list[dict] = []
        self.updates: list[tuple[str, dict]] = []
        self.photos: list[tuple[str, str]] = []

    def list_all(self):
        return [
            Vehicle(vehicle_id="v1", vin=VIN, is_active=True, created_at=None),
            Vehicle(vehicle_id="v2", vin="X" * 17, is_active=False, created_at=None),
        ]

    def get_by_id(self, vehicle_id):
        return next((v for v in self.list_all() if v.vehicle_id == vehicle_id), None)

    def create(self, payload):
        self.created.append(payload)
        return Vehicle(vehicle_id="v9", vin=payload["vin"], is_active=True, created_at=datetime(2026, 2, 1))

    def update(self, vehicle_id, payload):
        self.updates.append((vehicle_id, payload))

    def delete(self, vehicle_id):
        pass

    def decode_vin(self, vin):
        if self.decode_error:
            raise self.decode_error
        return self.decoded

    def extract_from_document(self, document):
        return self.extracted

    def upload_photo(self, vehicle_id, photo, *, kind):
        self.photos.append((vehicle_id, kind))


def _form(**overrides):
    form = {"vin": VIN, "serviceType": "small_service", "brand": "VW", "model": "Golf"}
    form.update(overrides)
    return form


def test_merge_decoded_prefers_nested_vehicle_data():
    data = {"vehicle": {"make": "Volkswagen", "year": 2010}, "make": "VW", "model": "Golf", "images": ["a.jpg"]}
    result = merge_decoded({"brand": "Alt"}, data)

    assert result.form["brand"] == "Volkswagen"
    assert result.form["model"] == "Golf"
    assert result.form["year"] == "2010"
    assert result.image_url == "a.jpg"


def test_merge_decoded_without_overwrite_keeps_user_input():
    result = merge_decoded({"brand": "Audi", "model": ""}, {"make": "VW", "model": "Golf"}, overwrite=False)
    assert result.form["brand"] == "Audi"
    assert result.form["model"] == "Golf"


def test_build_payload_requires_service_type_on_create():
    with pytest.raises(ValidationError, match="Pflichtfelder"):
        build_vehicle_payload(_form(serviceType=""), require_service_type=True)

    payload = build_vehicle_payload(_form(serviceType=""), require_service_type=False)
    assert payload["serviceType"] is None


def test_build_payload_vin_length_and_numbers():
    with pytest.raises(ValidationError, match="17"):
        build_vehicle_payload(_form(vin="WVW123"), require_service_type=True)

    payload = build_vehicle_payload(_form(vin=VIN.lower(), year="2019", mileage=" "), require_service_type=True)
    assert payload["vin"] == VIN
    assert payload["year"] == 2019
    assert payload["mileage"] is None


def test_build_payload_rejects_unknown_service_type():
    with pytest.raises(ValidationError):
        build_vehicle_payload(_form(serviceType="wash"), require_service_type=True)


def test_create_sets_status_and_uploads_photos():
    repo = FakeVehiclesRepo()
    photo = Upload(filename="car.jpg", content=b"img", mimetype="image/jpeg")

    VehicleService(repo).create(_form(status="active"), vehicle_photo=photo, document_photo=photo)

    assert repo.created[0]["status"] == "active"
    assert repo.created[0]["isActive"] is True
    assert repo.photos == [("v9", "vehicle"), ("v9", "document")]


def test_create_rejects_completed_status():
    with pytest.raises(ValidationError):
        VehicleService(FakeVehiclesRepo()).create(_form(status="completed"))


def test_set_status_completed_deactivates():
    repo = FakeVehiclesRepo()
    VehicleService(repo).set_status("v1", "completed")
    assert repo.updates == [("v1", {"status": "completed", "isActive": False})]


def test_list_active_only():
    vehicles = VehicleService(FakeVehiclesRepo()).list(active_only=True)
    assert [v.vehicle_id for v in vehicles] == ["v1"]


def test_get_unknown_vehicle():
    with pytest.raises(ValidationError, match="nicht gefunden"):
        VehicleService(FakeVehiclesRepo()).get("nope")


def test_extract_requires_document():
    with pytest.raises(ValidationError, match="Fahrzeugausweises"):
        VehicleService(FakeVehiclesRepo()).extract_from_document(None)


def test_extract_nothing_recognized():
    doc = Upload(filename="ausweis.jpg", content=b"img")
    with pytest.raises(ValidationError, match="manuell"):
        VehicleService(FakeVehiclesRepo(extracted={})).extract_from_document(doc)


def test_extract_decodes_vin_when_brand_missing():
    repo = FakeVehiclesRepo(
        extracted={"vin": VIN, "customerName": "Muster"},
        decoded={"make": "VW", "model": "Golf", "image": "golf.jpg"},
    )
    result = VehicleService(repo).extract_from_document(Upload(filename="a.jpg", content=b"x"))

    assert result.recognized == ["VIN", "Kundenname"]
    assert result.form["brand"] == "VW"
    assert result.form["customerName"] == "Muster"
    assert result.image_url == "golf.jpg"


def test_extract_keeps_ocr_result_when_decoder_fails():
    repo = FakeVehiclesRepo(extracted={"vin": VIN}, decode_error=ApiError("decoder down", status_code=502))
    result = VehicleService(repo).extract_from_document(Upload(filename="a.jpg", content=b"x"))
    assert result.form == {"vin": VIN}
