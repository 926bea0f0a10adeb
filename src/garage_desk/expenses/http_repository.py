from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..common.datetime_utils import parse_api_datetime
from ..core.enums import ExpenseCategory
from ..users.http_repository import to_user_ref
from ..vehicles.http_repository import to_vehicle_ref
from .model import Expense, WorkerSalary
from .repository import ExpenseRepository


def _iso(value: Optional[date]) -> Optional[str]:
    return value.strftime("%Y-%m-%d") if value else None


def to_expense(r: dict[str, Any]) -> Expense:
    try:
        category = ExpenseCategory(r.get("category"))
    except ValueError:
        category = ExpenseCategory.OTHER
    return Expense(
        expense_id=str(r["id"]),
        description=r.get("description") or "",
        category=category,
        amount=float(r.get("amount") or 0),
        date=parse_api_datetime(r.get("date")),
        notes=r.get("notes"),
        vehicle=to_vehicle_ref(r.get("vehicle")),
        created_by=to_user_ref(r.get("createdBy")),
        created_at=parse_api_datetime(r.get("createdAt")),
    )


def to_salary(r: dict[str, Any]) -> WorkerSalary:
    return WorkerSalary(
        user_id=str(r.get("userId", "")),
        user_name=r.get("userName") or "",
        user_email=r.get("userEmail") or "",
        hourly_rate=float(r.get("hourlyRate") or 0),
        total_hours=float(r.get("totalHours") or 0),
        salary=float(r.get("salary") or 0),
    )


class HttpExpenseRepository(ExpenseRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list(
        self,
        *,
        category: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[Expense]:
        params = {
            "category": category,
            "vehicleId": vehicle_id,
            "startDate": _iso(start_date),
            "endDate": _iso(end_date),
        }
        return [to_expense(r) for r in self._client.get("/expenses", params=params) or []]

    def create(self, payload: dict[str, Any]) -> Expense:
        return to_expense(self._client.post("/expenses", payload))

    def update(self, expense_id: str, payload: dict[str, Any]) -> None:
        self._client.patch(f"/expenses/{expense_id}", payload)

    def delete(self, expense_id: str) -> None:
        self._client.delete(f"/expenses/{expense_id}")

    def salaries(self, *, start_date: date, end_date: date) -> Sequence[WorkerSalary]:
        params = {"startDate": _iso(start_date), "endDate": _iso(end_date)}
        return [to_salary(r) for r in self._client.get("/expenses/salaries", params=params) or []]
