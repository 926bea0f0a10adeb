from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ExpenseCategory
from ..users.model import UserRef
from ..vehicles.model import VehicleRef


@dataclass(frozen=True)
class Expense:
    expense_id: str
    description: str
    category: ExpenseCategory
    amount: float
    date: Optional[datetime]
    notes: Optional[str] = None
    vehicle: Optional[VehicleRef] = None
    created_by: Optional[UserRef] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class WorkerSalary:
    """Hours and pay of one worker in the current pay period."""

    user_id: str
    user_name: str
    user_email: str
    hourly_rate: float
    total_hours: float
    salary: float
