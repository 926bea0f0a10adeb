from __future__ import annotations

import io
from datetime import timedelta

import qrcode

from garage_desk.core.constants import DEFAULT_SESSION_DAYS
from garage_desk.core.exceptions import ApiError

INVOICE_FORM = {
    "vehicle_id": "v1",
    "type": "invoice",
    "customerName": "Hans Muster",
    "description": ["Ölwechsel", ""],
    "quantity": ["1", "1"],
    "unit_price": ["80", "0"],
    "taxRate": "0",
}


def test_session_lifetime_uses_default_days(app):
    assert app.permanent_session_lifetime == timedelta(days=DEFAULT_SESSION_DAYS)


# calendars


def test_time_log_calendar_out_of_range_year_falls_back(as_worker):
    assert as_worker.get("/time-logs/calendar?year=0&month=1").status_code == 200
    assert as_worker.get("/time-logs/calendar?year=9999&month=12").status_code == 200


def test_appointment_calendar_out_of_range_year_falls_back(as_worker):
    assert as_worker.get("/appointments/calendar?year=0&month=1").status_code == 200
    assert as_worker.get("/appointments/calendar?year=9999&month=12").status_code == 200


# backend unreachable


def test_unreachable_backend_on_page_load_renders_503(as_worker, backend):
    backend.unreachable = True
    resp = as_worker.get("/check-in")

    assert resp.status_code == 503
    assert "Verbindungsfehler" in resp.get_data(as_text=True)


def test_unreachable_backend_on_action_is_flashed(as_worker, backend):
    backend.unreachable = True
    resp = as_worker.post("/check-in")

    assert resp.status_code == 302
    with as_worker.session_transaction() as sess:
        assert ("danger", "Verbindungsfehler. Bitte überprüfen Sie Ihre Internetverbindung.") in sess["_flashes"]


# QR scan


def _qr_image(data: str) -> io.BytesIO:
    buf = io.BytesIO()
    qrcode.make(data).save(buf, format="PNG")
    buf.seek(0)
    return buf


def test_qr_image_with_valid_code_checks_in(as_worker, backend):
    resp = as_worker.post(
        "/api/qr/checkin/image",
        data={"image": (_qr_image("TEST_QR_TOKEN"), "scan.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 200
    assert resp.get_json()["action"] == "check_in"
    assert backend.active is not None


def test_qr_scan_with_expired_session_answers_401(as_worker, backend):
    backend.unauthorized = True
    resp = as_worker.post("/api/qr/checkin", json={"qr_code": "TEST_QR_TOKEN"})

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


# invoices


def test_invoice_list_filters_document_type(as_admin):
    body = as_admin.get("/invoices?type=estimate").get_data(as_text=True)
    assert "INV-2026-0002" in body
    assert "INV-2026-0001" not in body


def test_invoice_export_filters_document_type(as_admin):
    lines = as_admin.get("/invoices/export.csv?type=estimate").data.decode("utf-8-sig").splitlines()
    assert len(lines) == 2
    assert lines[1].startswith("INV-2026-0002;Angebot;")


def test_invoice_new_creates_and_uploads_pdf(as_admin, backend):
    resp = as_admin.post("/invoices/new", data=INVOICE_FORM)

    assert resp.headers["Location"].endswith("/invoices/i-new")
    payload = backend.invoices.created[0]
    assert payload["taxRate"] == 0
    assert [i["description"] for i in payload["items"]] == ["Ölwechsel"]
    assert backend.invoices.uploads == [("i-new", "INV-2026-0003.pdf")]
    with as_admin.session_transaction() as sess:
        assert ("success", "Rechnung erstellt und PDF gespeichert!") in sess["_flashes"]


def test_invoice_new_keeps_invoice_when_upload_fails(as_admin, backend):
    backend.invoices.upload_error = ApiError("storage down", status_code=500)
    resp = as_admin.post("/invoices/new", data=INVOICE_FORM)

    assert resp.headers["Location"].endswith("/invoices/i-new")
    assert any(i.invoice_id == "i-new" for i in backend.invoices.items)
    with as_admin.session_transaction() as sess:
        assert ("warning", "Rechnung erstellt, PDF konnte nicht gespeichert werden") in sess["_flashes"]


def test_invoice_new_validation_error_rerenders_form(as_admin, backend):
    resp = as_admin.post("/invoices/new", data={**INVOICE_FORM, "customerName": " "})

    assert resp.status_code == 200
    assert "Bitte geben Sie den Kundennamen ein" in resp.get_data(as_text=True)
    assert backend.invoices.created == []


def test_invoice_new_form_drafts_vehicle_lines(as_admin):
    resp = as_admin.get("/invoices/new?vehicle_id=v1&type=invoice")
    body = resp.get_data(as_text=True)

    assert resp.status_code == 200
    assert "Bremsbeläge" in body
    assert "Hans Muster" in body


# vehicles


def test_vehicle_list_search(as_worker):
    body = as_worker.get("/vehicles?q=zh+123").get_data(as_text=True)
    assert "ZFA31200000000002" in body
    assert "WVWZZZ1KZAW000001" not in body


def test_vehicle_list_status_filter(as_worker):
    body = as_worker.get("/vehicles?status=on_hold").get_data(as_text=True)
    assert "Panda" in body
    assert "WVWZZZ1KZAW000001" not in body


def test_vehicle_create(as_worker, backend):
    resp = as_worker.post(
        "/vehicles/new",
        data={"vin": "wvwzzz1kzaw000009", "serviceType": "repair", "brand": "VW", "status": "active"},
    )

    assert resp.headers["Location"].endswith("/vehicles/v-new")
    payload = backend.vehicles.created[0]
    assert payload["vin"] == "WVWZZZ1KZAW000009"
    assert payload["status"] == "active"
    assert payload["isActive"] is True


def test_vehicle_create_short_vin_stays_on_form(as_worker, backend):
    resp = as_worker.post("/vehicles/new", data={"vin": "WVW123", "serviceType": "repair"})

    assert resp.status_code == 200
    assert backend.vehicles.created == []


def test_vehicle_decode_fills_form(as_worker):
    resp = as_worker.post("/vehicles/new", data={"action": "decode", "vin": "WVWZZZ1KZAW000009"})

    assert resp.status_code == 200
    assert "Volkswagen" in resp.get_data(as_text=True)


def test_vehicle_detail_invoice_tab_only_for_admin(as_admin):
    body = as_admin.get("/vehicles/v1?tab=invoices").get_data(as_text=True)
    assert "INV-2026-0001" in body


def test_vehicle_detail_invoice_tab_hidden_for_worker(as_worker):
    resp = as_worker.get("/vehicles/v1?tab=invoices")
    assert resp.status_code == 200
    assert "INV-2026-0001" not in resp.get_data(as_text=True)


def test_vehicle_detail_unknown_goes_back_to_list(as_worker):
    resp = as_worker.get("/vehicles/nope")
    assert resp.headers["Location"].endswith("/vehicles")


def test_vehicle_completed_is_deactivated(as_worker, backend):
    as_worker.post("/vehicles/v1/status", data={"status": "completed"})
    assert backend.vehicles.updates == [("v1", {"status": "completed", "isActive": False})]


def test_vehicle_delete_is_admin_only(as_worker, backend):
    resp = as_worker.post("/vehicles/v2/delete")
    assert resp.headers["Location"].endswith("/check-in")
    assert backend.vehicles.deleted == []


def test_vehicle_delete(as_admin, backend):
    resp = as_admin.post("/vehicles/v2/delete")
    assert resp.headers["Location"].endswith("/vehicles")
    assert backend.vehicles.deleted == ["v2"]


def test_vehicle_edit_sends_update(as_worker, backend):
    resp = as_worker.post("/vehicles/v1/edit", data={"vin": "WVWZZZ1KZAW000001", "mileage": "120000"})

    assert resp.headers["Location"].endswith("/vehicles/v1")
    vehicle_id, payload = backend.vehicles.updates[0]
    assert vehicle_id == "v1"
    assert payload["mileage"] == 120000


def test_car_time_log_books_hours(as_worker, backend):
    as_worker.post("/car-time-logs", data={"vehicle_id": "v1", "hours": "2,5", "notes": ""})
    assert backend.time_logs.created == [{"vehicle_id": "v1", "hours": 2.5, "notes": None}]


# expenses


def test_expense_page_renders_groups_and_salaries(as_admin):
    body = as_admin.get("/expenses").get_data(as_text=True)

    assert "Bremsbeläge" in body
    assert "Ohne Fahrzeug" in body
    assert "CHF 300.00" in body


def test_expense_create(as_admin, backend):
    resp = as_admin.post(
        "/expenses",
        data={"description": "Ölfilter", "amount": "24,50", "category": "parts", "date": "2026-02-10", "vehicleId": "v1"},
    )

    assert resp.headers["Location"].endswith("/expenses")
    assert backend.expenses.created == [
        {
            "description": "Ölfilter",
            "category": "parts",
            "amount": 24.5,
            "date": "2026-02-10",
            "notes": None,
            "vehicleId": "v1",
        }
    ]


def test_expense_update_and_delete(as_admin, backend):
    as_admin.post("/expenses", data={"expense_id": "x1", "description": "Beläge", "amount": "100"})
    as_admin.post("/expenses/x2/delete")

    assert backend.expenses.updates[0][0] == "x1"
    assert backend.expenses.deleted == ["x2"]


def test_expense_invalid_amount_is_flashed(as_admin, backend):
    as_admin.post("/expenses", data={"description": "Ölfilter", "amount": "-3"})

    assert backend.expenses.created == []
    with as_admin.session_transaction() as sess:
        assert sess["_flashes"][0][0] == "warning"


def test_hourly_rate_update(as_admin, backend):
    resp = as_admin.post("/workers/u-worker/hourly-rate", data={"hourly_rate": "35"})

    assert "view=workers" in resp.headers["Location"]
    assert backend.users.rates == [("u-worker", 35.0)]


def test_expenses_are_admin_only(as_worker, backend):
    as_worker.post("/expenses", data={"description": "Ölfilter", "amount": "10"})
    assert backend.expenses.created == []


# appointments


def test_appointment_calendar_shows_selected_day(as_worker):
    body = as_worker.get("/appointments/calendar?year=2026&month=3&day=2026-03-10").get_data(as_text=True)

    assert "10.03.2026" in body
    assert "Hans Muster" in body


def test_appointment_create(as_worker, backend):
    resp = as_worker.post(
        "/appointments",
        data={"customerName": "Erika Beispiel", "date": "2026-03-12", "time": "10:30", "serviceType": "tire_change"},
    )

    assert "day=2026-03-12" in resp.headers["Location"]
    payload = backend.appointments.created[0]
    assert payload["customerName"] == "Erika Beispiel"
    assert payload["serviceType"] == "tire_change"
    assert payload["status"] == "pending"
    assert payload["date"].endswith("Z")


def test_appointment_without_customer_is_rejected(as_worker, backend):
    as_worker.post("/appointments", data={"customerName": "", "date": "2026-03-12"})
    assert backend.appointments.created == []


def test_appointment_update_and_delete(as_worker, backend):
    as_worker.post(
        "/appointments",
        data={"appointment_id": "a1", "customerName": "Hans Muster", "date": "2026-03-10", "status": "completed"},
    )
    as_worker.post("/appointments/a1/delete")

    assert backend.appointments.updates[0][0] == "a1"
    assert backend.appointments.updates[0][1]["status"] == "completed"
    assert backend.appointments.deleted == ["a1"]


# dashboard


def test_dashboard_renders_for_admin(as_admin):
    resp = as_admin.get("/dashboard?period=all")
    assert resp.status_code == 200
    assert "INV-2026-0001" in resp.get_data(as_text=True)
