from __future__ import annotations

from datetime import date, datetime

import pytest

from garage_desk.core.enums import ExpenseCategory, FilterPeriod, Role
from garage_desk.core.exceptions import ValidationError
from garage_desk.expenses.model import Expense, WorkerSalary
from garage_desk.expenses.service import ExpenseService
from garage_desk.users.model import User
from garage_desk.vehicles.model import VehicleRef


class FakeExpensesRepo:
    def __init__(self):
        self.list_calls: list[dict] = []
        self.created: list[dict] = []
        self.updated: list[tuple[str, dict]] = []
        self.salary_calls: list[tuple[date, date]] = []

    def list(self, *, category=None, vehicle_id=None, start_date=None, end_date=None):
        self.list_calls.append(
            {"category": category, "vehicle_id": vehicle_id, "start_date": start_date, "end_date": end_date}
        )
        return []

    def create(self, payload):
        self.created.append(payload)

    def update(self, expense_id, payload):
        self.updated.append((expense_id, payload))

    def delete(self, expense_id):
        pass

    def salaries(self, *, start_date, end_date):
        self.salary_calls.append((start_date, end_date))
        return []


class FakeUsersRepo:
    def __init__(self, users=None):
        self.users = list(users or [])
        self.rates: dict[str, float] = {}

    def list_all(self):
        return self.users

    def update_hourly_rate(self, user_id, hourly_rate):
        self.rates[user_id] = hourly_rate


def _expense(eid, amount, category=ExpenseCategory.PARTS, vehicle=None):
    return Expense(
        expense_id=eid,
        description=f"Posten {eid}",
        category=category,
        amount=amount,
        date=datetime(2026, 2, 1),
        vehicle=vehicle,
    )


def test_save_creates_with_defaults():
    repo = FakeExpensesRepo()
    ExpenseService(repo, FakeUsersRepo()).save(
        {"description": " Bremsscheiben ", "amount": "189,90", "vehicleId": ""},
        today=date(2026, 2, 14),
    )

    payload = repo.created[0]
    assert payload["description"] == "Bremsscheiben"
    assert payload["amount"] == 189.9
    assert payload["category"] == "parts"
    assert payload["date"] == "2026-02-14"
    assert payload["vehicleId"] is None


def test_save_with_id_updates():
    repo = FakeExpensesRepo()
    ExpenseService(repo, FakeUsersRepo()).save(
        {"description": "Werkzeugkoffer", "amount": "80", "category": "tools", "date": "2026-02-01"},
        expense_id="e7",
    )
    assert repo.created == []
    assert repo.updated[0][0] == "e7"
    assert repo.updated[0][1]["category"] == "tools"


@pytest.mark.parametrize(
    "form, message",
    [
        ({"description": "", "amount": "10"}, "Beschreibung"),
        ({"description": "Öl", "amount": "0"}, "Betrag"),
        ({"description": "Öl", "amount": "zehn"}, "Betrag"),
        ({"description": "Öl", "amount": "10", "category": "food"}, "Kategorie"),
        ({"description": "Öl", "amount": "10", "date": "01.02.2026"}, "Datum"),
    ],
)
def test_save_validation(form, message):
    with pytest.raises(ValidationError, match=message):
        ExpenseService(FakeExpensesRepo(), FakeUsersRepo()).save(form)


def test_list_translates_all_and_period():
    repo = FakeExpensesRepo()
    ExpenseService(repo, FakeUsersRepo()).list(
        category="all", vehicle_id="v1", period=FilterPeriod.MONTH, today=date(2026, 2, 14)
    )
    assert repo.list_calls[0] == {
        "category": None,
        "vehicle_id": "v1",
        "start_date": date(2026, 2, 1),
        "end_date": date(2026, 2, 28),
    }


@pytest.mark.parametrize(
    "today, expected",
    [
        (date(2026, 2, 10), (date(2026, 1, 25), date(2026, 2, 25))),
        (date(2026, 2, 25), (date(2026, 2, 25), date(2026, 3, 25))),
        (date(2026, 12, 30), (date(2026, 12, 25), date(2027, 1, 25))),
    ],
)
def test_salaries_use_pay_period(today, expected):
    repo = FakeExpensesRepo()
    ExpenseService(repo, FakeUsersRepo()).salaries(today=today)
    assert repo.salary_calls == [expected]


def test_workers_only_active_worker_role():
    users = FakeUsersRepo(
        [
            User(user_id="1", email="a@x.ch", name="Anna", role=Role.WORKER),
            User(user_id="2", email="b@x.ch", name="Boss", role=Role.ADMIN),
            User(user_id="3", email="c@x.ch", name="Cem", role=Role.WORKER, is_active=False),
        ]
    )
    workers = ExpenseService(FakeExpensesRepo(), users).workers()
    assert [w.user_id for w in workers] == ["1"]


def test_update_hourly_rate():
    users = FakeUsersRepo()
    svc = ExpenseService(FakeExpensesRepo(), users)

    with pytest.raises(ValidationError, match="Stundenlohn"):
        svc.update_hourly_rate("1", "-5")

    svc.update_hourly_rate("1", "32.5")
    assert users.rates == {"1": 32.5}


def test_summary_and_grouping():
    golf = VehicleRef(vehicle_id="v1", vin="WVWZZZ1KZAW000001", brand="VW", model="Golf")
    expenses = [
        _expense("a", 100.0, vehicle=golf),
        _expense("b", 50.5, ExpenseCategory.TOOLS),
        _expense("c", 20.0, vehicle=golf),
    ]
    salaries = [
        WorkerSalary(user_id="1", user_name="Anna", user_email="a@x.ch", hourly_rate=30, total_hours=10, salary=300)
    ]

    summary = ExpenseService.summary(expenses, salaries)
    assert summary["total_expenses"] == 170.5
    assert summary["total_all"] == 470.5
    assert summary["by_category"][ExpenseCategory.PARTS] == 120.0

    groups = ExpenseService.group_by_vehicle(expenses)
    assert [g["vehicle"] for g in groups] == [golf, None]
    assert groups[0]["total"] == 120.0
