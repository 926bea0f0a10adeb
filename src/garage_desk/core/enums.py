from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Rolle eines Benutzers, bestimmt die sichtbaren Seiten."""

    ADMIN = "admin"
    MANAGER = "manager"
    WORKER = "worker"


class VehicleStatus(str, Enum):
    ON_HOLD = "on_hold"
    ACTIVE = "active"
    COMPLETED = "completed"


class ServiceType(str, Enum):
    SMALL_SERVICE = "small_service"
    BIG_SERVICE = "big_service"
    TIRE_CHANGE = "tire_change"
    BRAKE_SERVICE = "brake_service"
    REPAIR = "repair"
    INSPECTION = "inspection"

    @property
    def label(self) -> str:
        return SERVICE_TYPE_LABELS[self]

    @property
    def estimated_hours(self) -> float:
        return SERVICE_TYPE_HOURS[self]


SERVICE_TYPE_LABELS = {
    ServiceType.SMALL_SERVICE: "Kleine Wartung",
    ServiceType.BIG_SERVICE: "Grosse Wartung",
    ServiceType.TIRE_CHANGE: "Reifenwechsel",
    ServiceType.BRAKE_SERVICE: "Bremsenservice",
    ServiceType.REPAIR: "Reparatur",
    ServiceType.INSPECTION: "Inspektion",
}

# Same packages the backend uses for estimates.
SERVICE_TYPE_HOURS = {
    ServiceType.SMALL_SERVICE: 1.5,
    ServiceType.BIG_SERVICE: 4.0,
    ServiceType.TIRE_CHANGE: 1.0,
    ServiceType.BRAKE_SERVICE: 2.5,
    ServiceType.REPAIR: 3.0,
    ServiceType.INSPECTION: 1.0,
}


class InvoiceType(str, Enum):
    """Rechnung oder Angebot (Offerte)."""

    INVOICE = "invoice"
    ESTIMATE = "estimate"

    @property
    def label(self) -> str:
        return "Rechnung" if self is InvoiceType.INVOICE else "Angebot"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return {
            InvoiceStatus.DRAFT: "Entwurf",
            InvoiceStatus.SENT: "Gesendet",
            InvoiceStatus.PAID: "Bezahlt",
            InvoiceStatus.CANCELLED: "Storniert",
        }[self]


class ExpenseCategory(str, Enum):
    PARTS = "parts"
    LABOR = "labor"
    TOOLS = "tools"
    SUPPLIES = "supplies"
    OTHER = "other"

    @property
    def label(self) -> str:
        return EXPENSE_CATEGORY_LABELS[self]


EXPENSE_CATEGORY_LABELS = {
    ExpenseCategory.PARTS: "Ersatzteile",
    ExpenseCategory.LABOR: "Arbeitszeit",
    ExpenseCategory.TOOLS: "Werkzeuge",
    ExpenseCategory.SUPPLIES: "Materialien",
    ExpenseCategory.OTHER: "Sonstiges",
}


class AppointmentStatus(str, Enum):
    """Status eines Termins im Kalender."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class FilterPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"
