from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import requests

from .api.client import ApiClient
from .appointments.http_repository import HttpAppointmentRepository
from .appointments.service import AppointmentService
from .auth.http_repository import HttpAuthGateway
from .auth.service import AuthService
from .core.constants import DEFAULT_API_TIMEOUT, DEFAULT_HOURLY_RATE, DEFAULT_TAX_RATE
from .dashboard.service import DashboardService
from .expenses.http_repository import HttpExpenseRepository
from .expenses.service import ExpenseService
from .invoices.http_repository import HttpInvoiceRepository
from .invoices.pdf import CompanyInfo
from .invoices.service import InvoiceService
from .time_logs.http_repository import HttpTimeLogRepository
from .time_logs.service import TimeLogService
from .users.http_repository import HttpUserRepository
from .vehicles.http_repository import HttpVehicleRepository
from .vehicles.service import VehicleService
from .work_sessions.http_repository import HttpWorkSessionRepository
from .work_sessions.service import WorkSessionService


@dataclass(frozen=True)
class Container:
    company: CompanyInfo

    auth_service: AuthService
    vehicle_service: VehicleService
    work_session_service: WorkSessionService
    time_log_service: TimeLogService
    invoice_service: InvoiceService
    expense_service: ExpenseService
    appointment_service: AppointmentService
    dashboard_service: DashboardService


def build_container(
    *,
    api_url: str,
    token_provider: Optional[Callable[[], Optional[str]]] = None,
    timeout: float = DEFAULT_API_TIMEOUT,
    hourly_rate: float = DEFAULT_HOURLY_RATE,
    default_tax_rate: float = DEFAULT_TAX_RATE,
    company: Optional[CompanyInfo] = None,
    session: Optional[requests.Session] = None,
) -> Container:
    client = ApiClient(api_url, token_provider=token_provider, session=session, timeout=timeout)

    users_repo = HttpUserRepository(client)
    vehicles_repo = HttpVehicleRepository(client)
    sessions_repo = HttpWorkSessionRepository(client)
    time_logs_repo = HttpTimeLogRepository(client)
    invoices_repo = HttpInvoiceRepository(client)
    expenses_repo = HttpExpenseRepository(client)
    appointments_repo = HttpAppointmentRepository(client)

    return Container(
        company=company or CompanyInfo(),
        auth_service=AuthService(HttpAuthGateway(client)),
        vehicle_service=VehicleService(vehicles_repo),
        work_session_service=WorkSessionService(sessions_repo),
        time_log_service=TimeLogService(time_logs_repo),
        invoice_service=InvoiceService(
            invoices_repo,
            expenses_repo,
            time_logs_repo,
            hourly_rate=hourly_rate,
            default_tax_rate=default_tax_rate,
        ),
        expense_service=ExpenseService(expenses_repo, users_repo),
        appointment_service=AppointmentService(appointments_repo),
        dashboard_service=DashboardService(invoices_repo, time_logs_repo, vehicles_repo, expenses_repo),
    )
