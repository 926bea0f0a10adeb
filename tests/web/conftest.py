from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytest

from garage_desk.appointments.model import Appointment
from garage_desk.appointments.service import AppointmentService
from garage_desk.auth.service import AuthService
from garage_desk.container import Container
from garage_desk.core.enums import (
    AppointmentStatus,
    ExpenseCategory,
    InvoiceStatus,
    InvoiceType,
    Role,
    VehicleStatus,
)
from garage_desk.core.exceptions import ApiConnectionError, ApiError, AuthenticationError, UnauthorizedError
from garage_desk.dashboard.service import DashboardService
from garage_desk.expenses.model import Expense, WorkerSalary
from garage_desk.expenses.service import ExpenseService
from garage_desk.invoices.model import Invoice, InvoiceItem
from garage_desk.invoices.pdf import CompanyInfo
from garage_desk.invoices.service import InvoiceService
from garage_desk.main import create_app
from garage_desk.time_logs.model import TimeLog
from garage_desk.time_logs.service import TimeLogService
from garage_desk.users.model import User
from garage_desk.vehicles.model import Vehicle, VehicleRef
from garage_desk.vehicles.service import VehicleService
from garage_desk.work_sessions.model import WorkSession
from garage_desk.work_sessions.service import WorkSessionService

ADMIN = User(user_id="u-admin", email="chef@garage.ch", name="Chef", role=Role.ADMIN)
WORKER = User(user_id="u-worker", email="max@garage.ch", name="Max", role=Role.WORKER, hourly_rate=30.0)
GOLF = VehicleRef(vehicle_id="v1", vin="WVWZZZ1KZAW000001", brand="VW", model="Golf")


class FakeBackend:
    """Auth and work sessions in memory; owns the switches every fake checks."""

    def __init__(self):
        self.unauthorized = False
        self.unreachable = False
        self.active: Optional[WorkSession] = None
        self.vehicles = FakeVehicles(self)
        self.invoices = FakeInvoices(self)
        self.expenses = FakeExpenses(self)
        self.users = FakeUsers(self)
        self.appointments = FakeAppointments(self)
        self.time_logs = FakeTimeLogs(self)

    def check(self):
        if self.unauthorized:
            raise UnauthorizedError("Unauthorized", status_code=401, path="/")
        if self.unreachable:
            raise ApiConnectionError("Verbindungsfehler. Bitte überprüfen Sie Ihre Internetverbindung.", path="/")

    # auth
    def login(self, email, password):
        if password != "secret":
            raise AuthenticationError("Ungültige Anmeldedaten")
        return {"access_token": "firm-token", "user": {"id": "firm", "user_metadata": {"name": "Ocean"}}}

    def register(self, *, email, password, name, role):
        return {}

    def logout(self, access_token):
        pass

    def list_workers(self):
        self.check()
        return [ADMIN, WORKER]

    def verify_pin(self, *, pin, user_id):
        if pin != "1234":
            raise AuthenticationError("Ungültiger PIN")
        return next(u for u in (ADMIN, WORKER) if u.user_id == user_id)

    # work sessions
    def get_active(self):
        self.check()
        return self.active

    def check_in(self):
        self.check()
        self.active = WorkSession(session_id="s1", check_in=datetime(2026, 2, 3, 8, 0))
        return self.active

    def check_out(self):
        self.check()
        closed = WorkSession(
            session_id="s1", check_in=self.active.check_in, check_out=datetime(2026, 2, 3, 12, 15), hours=4.25
        )
        self.active = None
        return closed

    def list_for_user(self, user_id):
        self.check()
        return []

    def create_manual(self, *, check_in, check_out):
        return WorkSession(session_id="m1", check_in=check_in, check_out=check_out)


class FakeVehicles:
    def __init__(self, backend: FakeBackend):
        self.backend = backend
        self.items = {
            "v1": Vehicle(
                vehicle_id="v1",
                vin="WVWZZZ1KZAW000001",
                is_active=True,
                created_at=datetime(2026, 2, 1, 9, 0),
                brand="VW",
                model="Golf",
                service_type="small_service",
                customer_name="Hans Muster",
                status=VehicleStatus.ACTIVE,
            ),
            "v2": Vehicle(
                vehicle_id="v2",
                vin="ZFA31200000000002",
                is_active=True,
                created_at=datetime(2026, 2, 2, 9, 0),
                brand="Fiat",
                model="Panda",
                customer_name="Erika Beispiel",
                license_plate="ZH 12345",
                status=VehicleStatus.ON_HOLD,
            ),
        }
        self.created: list[dict] = []
        self.updates: list[tuple[str, dict]] = []
        self.deleted: list[str] = []

    def list_all(self):
        self.backend.check()
        return list(self.items.values())

    def get_by_id(self, vehicle_id):
        self.backend.check()
        return self.items.get(vehicle_id)

    def create(self, payload):
        self.created.append(payload)
        vehicle = Vehicle(vehicle_id="v-new", vin=payload["vin"], is_active=True, created_at=None)
        self.items[vehicle.vehicle_id] = vehicle
        return vehicle

    def update(self, vehicle_id, payload):
        self.updates.append((vehicle_id, payload))

    def delete(self, vehicle_id):
        self.deleted.append(vehicle_id)
        self.items.pop(vehicle_id, None)

    def decode_vin(self, vin):
        return {"make": "Volkswagen", "model": "Golf", "year": 2010}

    def extract_from_document(self, document):
        return {}

    def upload_photo(self, vehicle_id, photo, *, kind):
        pass


class FakeInvoices:
    def __init__(self, backend: FakeBackend):
        self.backend = backend
        self.items = [
            Invoice(
                invoice_id="i1",
                invoice_number="INV-2026-0001",
                type=InvoiceType.INVOICE,
                status=InvoiceStatus.PAID,
                customer_name="Müller; AG",
                created_at=datetime(2026, 2, 3, 10, 0),
                items=(InvoiceItem(description="Service", quantity=1, unit_price=200, total=200),),
                subtotal=200.0,
                tax_rate=7.7,
                tax_amount=15.4,
                total=215.4,
                vehicle=GOLF,
            ),
            Invoice(
                invoice_id="e1",
                invoice_number="INV-2026-0002",
                type=InvoiceType.ESTIMATE,
                status=InvoiceStatus.DRAFT,
                customer_name="Erika Beispiel",
                created_at=datetime(2026, 2, 1, 10, 0),
                subtotal=100.0,
                tax_rate=7.7,
                tax_amount=7.7,
                total=107.7,
            ),
        ]
        self.created: list[dict] = []
        self.uploads: list[tuple[str, str]] = []
        self.upload_error: Optional[ApiError] = None

    def list(self, *, vehicle_id=None):
        self.backend.check()
        return [i for i in self.items if vehicle_id is None or (i.vehicle and i.vehicle.vehicle_id == vehicle_id)]

    def get_by_id(self, invoice_id):
        self.backend.check()
        return next((i for i in self.items if i.invoice_id == invoice_id), None)

    def create(self, payload):
        self.created.append(payload)
        invoice = Invoice(
            invoice_id="i-new",
            invoice_number="INV-2026-0003",
            type=InvoiceType(payload["type"]),
            status=InvoiceStatus.DRAFT,
            customer_name=payload["customerName"],
            created_at=datetime(2026, 2, 20, 10, 0),
            items=tuple(
                InvoiceItem(
                    description=i["description"],
                    quantity=i["quantity"],
                    unit_price=i["unitPrice"],
                    total=i["total"],
                )
                for i in payload["items"]
            ),
            tax_rate=payload["taxRate"],
            vehicle=GOLF,
        )
        self.items.append(invoice)
        return invoice

    def update_status(self, invoice_id, status):
        pass

    def delete(self, invoice_id):
        pass

    def upload_pdf(self, invoice_id, pdf):
        if self.upload_error:
            raise self.upload_error
        self.uploads.append((invoice_id, pdf.filename))

    def create_estimate_for_vehicle(self, vehicle_id, payload):
        return self.items[1]

    def create_invoice_for_vehicle(self, vehicle_id, payload):
        return self.items[0]


class FakeExpenses:
    def __init__(self, backend: FakeBackend):
        self.backend = backend
        self.items = [
            Expense(
                expense_id="x1",
                description="Bremsbeläge",
                category=ExpenseCategory.PARTS,
                amount=120.0,
                date=datetime(2026, 2, 4),
                vehicle=GOLF,
            ),
            Expense(
                expense_id="x2",
                description="Werkstattmiete",
                category=ExpenseCategory.OTHER,
                amount=1500.0,
                date=datetime(2026, 2, 1),
            ),
        ]
        self.created: list[dict] = []
        self.updates: list[tuple[str, dict]] = []
        self.deleted: list[str] = []

    def list(self, *, category=None, vehicle_id=None, start_date=None, end_date=None):
        self.backend.check()
        return [
            e
            for e in self.items
            if (category is None or e.category.value == category)
            and (vehicle_id is None or (e.vehicle and e.vehicle.vehicle_id == vehicle_id))
        ]

    def create(self, payload):
        self.created.append(payload)

    def update(self, expense_id, payload):
        self.updates.append((expense_id, payload))

    def delete(self, expense_id):
        self.deleted.append(expense_id)

    def salaries(self, *, start_date, end_date):
        return [
            WorkerSalary(
                user_id="u-worker",
                user_name="Max",
                user_email="max@garage.ch",
                hourly_rate=30.0,
                total_hours=10.0,
                salary=300.0,
            )
        ]


class FakeUsers:
    def __init__(self, backend: FakeBackend):
        self.backend = backend
        self.rates: list[tuple[str, float]] = []

    def list_all(self):
        self.backend.check()
        return [ADMIN, WORKER]

    def update_hourly_rate(self, user_id, hourly_rate):
        self.rates.append((user_id, hourly_rate))


class FakeAppointments:
    def __init__(self, backend: FakeBackend):
        self.backend = backend
        self.items = [
            Appointment(
                appointment_id="a1",
                customer_name="Hans Muster",
                date=datetime(2026, 3, 10, 9, 0),
                service_type="small_service",
                status=AppointmentStatus.CONFIRMED,
                vehicle=GOLF,
            )
        ]
        self.created: list[dict] = []
        self.updates: list[tuple[str, dict]] = []
        self.deleted: list[str] = []

    def list_all(self):
        self.backend.check()
        return self.items

    def create(self, payload):
        self.created.append(payload)

    def update(self, appointment_id, payload):
        self.updates.append((appointment_id, payload))

    def delete(self, appointment_id):
        self.deleted.append(appointment_id)


class FakeTimeLogs:
    def __init__(self, backend: FakeBackend):
        self.backend = backend
        self.created: list[dict] = []

    def list(self, *, vehicle_id=None):
        self.backend.check()
        return []

    def create(self, *, vehicle_id, hours, notes=None):
        self.created.append({"vehicle_id": vehicle_id, "hours": hours, "notes": notes})
        return TimeLog(log_id="t1", hours=hours, created_at=datetime(2026, 2, 3, 17, 0))

    def total_hours(self, vehicle_id):
        return 0.0


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def app(backend):
    container = Container(
        company=CompanyInfo(),
        auth_service=AuthService(backend),
        vehicle_service=VehicleService(backend.vehicles),
        work_session_service=WorkSessionService(backend),
        time_log_service=TimeLogService(backend.time_logs),
        invoice_service=InvoiceService(backend.invoices, backend.expenses, backend.time_logs),
        expense_service=ExpenseService(backend.expenses, backend.users),
        appointment_service=AppointmentService(backend.appointments),
        dashboard_service=DashboardService(backend.invoices, backend.time_logs, backend.vehicles, backend.expenses),
    )
    return create_app(container=container, settings_module="garage_desk.settings.testing")


@pytest.fixture()
def client(app):
    return app.test_client()


def _login(client, worker: Optional[User]):
    with client.session_transaction() as sess:
        sess["token"] = "firm-token"
        sess["user"] = {"id": "firm", "email": "firma@garage.ch", "name": "Ocean", "role": "worker"}
        if worker:
            sess["current_worker"] = {
                "id": worker.user_id,
                "email": worker.email,
                "name": worker.name,
                "role": worker.role.value,
            }
            sess["worker_token"] = worker.user_id


@pytest.fixture()
def as_firm(client):
    _login(client, None)
    return client


@pytest.fixture()
def as_worker(client):
    _login(client, WORKER)
    return client


@pytest.fixture()
def as_admin(client):
    _login(client, ADMIN)
    return client
