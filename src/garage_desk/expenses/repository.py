from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from .model import Expense, WorkerSalary


class ExpenseRepository(Protocol):
    def list(
        self,
        *,
        category: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[Expense]:
        raise NotImplementedError

    def create(self, payload: dict[str, Any]) -> Expense:
        raise NotImplementedError

    def update(self, expense_id: str, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, expense_id: str) -> None:
        raise NotImplementedError

    def salaries(self, *, start_date: date, end_date: date) -> Sequence[WorkerSalary]:
        raise NotImplementedError
