from __future__ import annotations

from collections import OrderedDict
from datetime import date
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, period_range, salary_period
from ..common.validators import blank_to_none, require_non_empty, require_positive
from ..core.enums import ExpenseCategory, FilterPeriod, Role
from ..core.exceptions import ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import Expense, WorkerSalary
from .repository import ExpenseRepository


class ExpenseService:
    """Use cases: costs per vehicle, worker salaries and hourly rates."""

    def __init__(self, expenses: ExpenseRepository, users: UserRepository):
        self._expenses = expenses
        self._users = users

    def list(
        self,
        *,
        category: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        period: FilterPeriod = FilterPeriod.ALL,
        today: Optional[date] = None,
    ) -> Sequence[Expense]:
        start, end = period_range(period, today or date.today())
        return self._expenses.list(
            category=None if category in (None, "", "all") else category,
            vehicle_id=None if vehicle_id in (None, "", "all") else vehicle_id,
            start_date=start.date() if start else None,
            end_date=end.date() if end else None,
        )

    def for_vehicle(self, vehicle_id: str) -> Sequence[Expense]:
        return self._expenses.list(vehicle_id=vehicle_id)

    def save(self, form: Mapping[str, str], expense_id: Optional[str] = None, *, today: Optional[date] = None) -> None:
        description = require_non_empty(form.get("description"), "Bitte geben Sie eine Beschreibung ein")
        amount = require_positive(form.get("amount"), "Bitte geben Sie einen gültigen Betrag ein")
        try:
            category = ExpenseCategory(form.get("category") or ExpenseCategory.PARTS.value)
        except ValueError:
            raise ValidationError("Ungültige Kategorie")

        raw_date = (form.get("date") or "").strip()
        try:
            expense_date = parse_iso_date(raw_date) if raw_date else (today or date.today())
        except ValueError:
            raise ValidationError("Ungültiges Datum")

        payload = {
            "description": description,
            "category": category.value,
            "amount": amount,
            "date": expense_date.strftime("%Y-%m-%d"),
            "notes": blank_to_none(form.get("notes")),
            "vehicleId": blank_to_none(form.get("vehicleId")),
        }
        if expense_id:
            self._expenses.update(expense_id, payload)
        else:
            self._expenses.create(payload)

    def delete(self, expense_id: str) -> None:
        self._expenses.delete(expense_id)

    def salaries(self, *, today: Optional[date] = None) -> Sequence[WorkerSalary]:
        start, end = salary_period(today or date.today())
        return self._expenses.salaries(start_date=start, end_date=end)

    def workers(self) -> list[User]:
        return [u for u in self._users.list_all() if u.is_active and u.role == Role.WORKER]

    def update_hourly_rate(self, user_id: str, rate) -> None:
        value = require_positive(rate, "Bitte geben Sie einen gültigen Stundenlohn ein")
        self._users.update_hourly_rate(user_id, value)

    @staticmethod
    def summary(expenses: Sequence[Expense], salaries: Sequence[WorkerSalary]) -> dict:
        total_expenses = round(sum(e.amount for e in expenses), 2)
        total_salaries = round(sum(s.salary for s in salaries), 2)
        by_category: dict[ExpenseCategory, float] = {}
        for e in expenses:
            by_category[e.category] = by_category.get(e.category, 0.0) + e.amount
        return {
            "total_expenses": total_expenses,
            "total_salaries": total_salaries,
            "total_all": round(total_expenses + total_salaries, 2),
            "by_category": by_category,
        }

    @staticmethod
    def group_by_vehicle(expenses: Sequence[Expense]) -> list[dict]:
        groups: "OrderedDict[str, dict]" = OrderedDict()
        for e in expenses:
            key = e.vehicle.vehicle_id if e.vehicle else ""
            g = groups.setdefault(key, {"vehicle": e.vehicle, "expenses": [], "total": 0.0})
            g["expenses"].append(e)
            g["total"] += e.amount
        return list(groups.values())
