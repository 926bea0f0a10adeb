from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..common.calendar_grid import MONTH_NAMES_DE
from ..common.datetime_utils import in_period, month_start
from ..core.constants import DASHBOARD_REVENUE_MONTHS
from ..core.enums import FilterPeriod, InvoiceStatus
from ..expenses.repository import ExpenseRepository
from ..invoices.model import Invoice
from ..invoices.repository import InvoiceRepository
from ..time_logs.repository import TimeLogRepository
from ..vehicles.repository import VehicleRepository


@dataclass(frozen=True)
class MonthRevenue:
    label: str
    revenue: float
    share: float


@dataclass(frozen=True)
class DashboardStats:
    period: FilterPeriod
    total_revenue: float
    pending_revenue: float
    period_revenue: float
    total_invoiced: float
    paid_invoices: int
    unpaid_invoices: int
    draft_invoices: int
    total_hours: float
    time_entries: int
    active_vehicles: int
    total_vehicles: int
    total_expenses: float
    net_profit: float
    revenue_by_month: Sequence[MonthRevenue]
    recent_invoices: Sequence[Invoice]


def _sum_total(invoices: Sequence[Invoice], status: Optional[InvoiceStatus] = None) -> float:
    return round(sum(i.total for i in invoices if status is None or i.status == status), 2)


class DashboardService:
    """Admin overview: revenue, hours, vehicles and costs."""

    def __init__(
        self,
        invoices: InvoiceRepository,
        time_logs: TimeLogRepository,
        vehicles: VehicleRepository,
        expenses: ExpenseRepository,
    ):
        self._invoices = invoices
        self._time_logs = time_logs
        self._vehicles = vehicles
        self._expenses = expenses

    def stats(self, period: FilterPeriod = FilterPeriod.MONTH, *, today: Optional[date] = None) -> DashboardStats:
        today = today or date.today()
        invoices = list(self._invoices.list())
        logs = list(self._time_logs.list())
        vehicles = list(self._vehicles.list_all())
        expenses = list(self._expenses.list())

        period_invoices = [i for i in invoices if in_period(i.created_at, period, today)]
        period_logs = [t for t in logs if in_period(t.created_at, period, today)]
        period_expenses = [e for e in expenses if in_period(e.created_at, period, today)]

        # Lifetime paid revenue, not limited to the selected period.
        total_revenue = _sum_total(invoices, InvoiceStatus.PAID)
        total_expenses = round(sum(e.amount for e in period_expenses), 2)

        recent = sorted(
            period_invoices,
            key=lambda i: i.created_at.timestamp() if i.created_at else 0,
            reverse=True,
        )[:5]

        return DashboardStats(
            period=period,
            total_revenue=total_revenue,
            pending_revenue=_sum_total(invoices, InvoiceStatus.SENT),
            period_revenue=_sum_total(period_invoices, InvoiceStatus.PAID),
            total_invoiced=_sum_total(period_invoices),
            paid_invoices=sum(1 for i in invoices if i.status == InvoiceStatus.PAID),
            unpaid_invoices=sum(1 for i in invoices if i.status == InvoiceStatus.SENT),
            draft_invoices=sum(1 for i in invoices if i.status == InvoiceStatus.DRAFT),
            total_hours=round(sum(t.hours for t in period_logs), 2),
            time_entries=len(period_logs),
            active_vehicles=sum(1 for v in vehicles if v.is_active),
            total_vehicles=len(vehicles),
            total_expenses=total_expenses,
            net_profit=round(total_revenue - total_expenses, 2),
            revenue_by_month=self.revenue_by_month(invoices, today=today),
            recent_invoices=recent,
        )

    @staticmethod
    def revenue_by_month(invoices: Sequence[Invoice], *, today: date) -> list[MonthRevenue]:
        """Paid revenue per month, oldest first, ending with the current month."""
        buckets = []
        for back in range(DASHBOARD_REVENUE_MONTHS - 1, -1, -1):
            start = month_start(today, back)
            revenue = sum(
                i.total
                for i in invoices
                if i.status == InvoiceStatus.PAID
                and i.created_at
                and (i.created_at.year, i.created_at.month) == (start.year, start.month)
            )
            buckets.append((MONTH_NAMES_DE[start.month - 1][:3], round(revenue, 2)))

        peak = max([r for _, r in buckets] + [1])
        return [MonthRevenue(label=label, revenue=r, share=round(r / peak * 100, 1)) for label, r in buckets]
