from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import in_period
from ..common.uploads import Upload
from ..common.validators import blank_to_none, parse_float
from ..core.constants import DEFAULT_HOURLY_RATE, DEFAULT_TAX_RATE
from ..core.enums import FilterPeriod, InvoiceStatus, InvoiceType, ServiceType
from ..core.exceptions import ApiError, ValidationError
from ..expenses.repository import ExpenseRepository
from ..time_logs.repository import TimeLogRepository
from ..vehicles.model import Vehicle
from .model import Customer, Invoice, InvoiceItem, Totals
from .repository import InvoiceRepository

logger = logging.getLogger(__name__)


def line_total(quantity: float, unit_price: float) -> float:
    return round(quantity * unit_price, 2)


def compute_totals(items: Sequence[InvoiceItem], tax_rate: float) -> Totals:
    subtotal = round(sum(i.total for i in items), 2)
    tax_amount = round(subtotal * tax_rate / 100, 2)
    return Totals(subtotal=subtotal, tax_amount=tax_amount, total=round(subtotal + tax_amount, 2))


def parse_items(
    descriptions: Sequence[str],
    quantities: Sequence[str],
    unit_prices: Sequence[str],
) -> list[InvoiceItem]:
    """Build items from the parallel form lists; blank rows are skipped."""
    items = []
    for idx, description in enumerate(descriptions):
        description = (description or "").strip()
        if not description:
            continue
        quantity = parse_float(quantities[idx] if idx < len(quantities) else None, 0.0) or 0.0
        unit_price = parse_float(unit_prices[idx] if idx < len(unit_prices) else None, 0.0) or 0.0
        items.append(
            InvoiceItem(
                description=description,
                quantity=quantity,
                unit_price=unit_price,
                total=line_total(quantity, unit_price),
            )
        )
    return items


class InvoiceService:
    """Use cases: invoices and estimates (Offerten)."""

    def __init__(
        self,
        invoices: InvoiceRepository,
        expenses: ExpenseRepository,
        time_logs: TimeLogRepository,
        *,
        hourly_rate: float = DEFAULT_HOURLY_RATE,
        default_tax_rate: float = DEFAULT_TAX_RATE,
    ):
        self._invoices = invoices
        self._expenses = expenses
        self._time_logs = time_logs
        self.hourly_rate = hourly_rate
        self.default_tax_rate = default_tax_rate

    def list(
        self,
        *,
        vehicle_id: Optional[str] = None,
        period: FilterPeriod = FilterPeriod.ALL,
        status: Optional[str] = None,
        invoice_type: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[Invoice]:
        today = today or date.today()
        items = [i for i in self._invoices.list(vehicle_id=vehicle_id) if in_period(i.created_at, period, today)]
        if invoice_type and invoice_type != "all":
            items = [i for i in items if i.type.value == invoice_type]
        if status and status != "all":
            items = [i for i in items if i.status.value == status]
        items.sort(key=lambda i: i.created_at.timestamp() if i.created_at else 0, reverse=True)
        return items

    def get(self, invoice_id: str) -> Invoice:
        invoice = self._invoices.get_by_id(invoice_id)
        if not invoice:
            raise ValidationError("Rechnung nicht gefunden")
        return invoice

    def totals(self, items: Sequence[InvoiceItem], tax_rate: Optional[float] = None) -> Totals:
        return compute_totals(items, self.default_tax_rate if tax_rate is None else tax_rate)

    def create(
        self,
        *,
        invoice_type: str,
        vehicle_id: Optional[str],
        customer: Customer,
        items: Sequence[InvoiceItem],
        tax_rate=None,
        notes: Optional[str] = None,
    ) -> Invoice:
        try:
            kind = InvoiceType(invoice_type)
        except ValueError:
            raise ValidationError("Ungültiger Dokumenttyp")
        if not vehicle_id:
            raise ValidationError("Bitte wählen Sie ein Fahrzeug aus")
        if not customer.name or not customer.name.strip():
            raise ValidationError("Bitte geben Sie den Kundennamen ein")
        if not items:
            raise ValidationError("Bitte fügen Sie mindestens eine Position hinzu")

        rate = parse_float(tax_rate)
        if rate is None:
            rate = self.default_tax_rate
        if rate < 0:
            raise ValidationError("Der Steuersatz darf nicht negativ sein")
        payload = {
            "type": kind.value,
            "vehicleId": vehicle_id,
            "customerName": customer.name.strip(),
            "customerEmail": blank_to_none(customer.email),
            "customerAddress": blank_to_none(customer.address),
            "items": [i.to_payload() for i in items],
            "taxRate": rate,
            "notes": blank_to_none(notes),
        }
        return self._invoices.create(payload)

    def draft_items(self, vehicle: Vehicle, invoice_type: InvoiceType) -> list[InvoiceItem]:
        """Proposed lines: the vehicle's expenses plus labour.

        Estimates use the service package's estimated hours, invoices the
        hours actually booked on the vehicle.
        """
        items = [
            InvoiceItem(description=e.description, quantity=1, unit_price=e.amount, total=e.amount)
            for e in self._expenses.list(vehicle_id=vehicle.vehicle_id)
        ]

        if invoice_type == InvoiceType.ESTIMATE:
            hours = 0.0
            if vehicle.service_type:
                try:
                    hours = ServiceType(vehicle.service_type).estimated_hours
                except ValueError:
                    hours = 0.0
            description = f"Arbeitsstunden (geschätzt: {hours:.2f}h)"
        else:
            hours = self._time_logs.total_hours(vehicle.vehicle_id)
            description = f"Arbeitsstunden ({hours:.2f}h)"

        if hours > 0:
            items.append(
                InvoiceItem(
                    description=description,
                    quantity=hours,
                    unit_price=self.hourly_rate,
                    total=line_total(hours, self.hourly_rate),
                )
            )
        return items

    def create_estimate_for_vehicle(self, vehicle: Vehicle, customer: Customer) -> Invoice:
        if not customer.name or not customer.name.strip():
            raise ValidationError("Bitte geben Sie einen Kundennamen ein")
        if not vehicle.service_type:
            raise ValidationError("Bitte wählen Sie zuerst einen Service-Typ für das Fahrzeug")
        return self._invoices.create_estimate_for_vehicle(vehicle.vehicle_id, customer.to_payload())

    def create_invoice_for_vehicle(self, vehicle: Vehicle, customer: Customer) -> Invoice:
        if not customer.name or not customer.name.strip():
            raise ValidationError("Bitte geben Sie einen Kundennamen ein")
        confirmed_hours = self._time_logs.total_hours(vehicle.vehicle_id)
        if confirmed_hours <= 0:
            raise ValidationError("Es wurden noch keine Arbeitsstunden erfasst")
        payload = {**customer.to_payload(), "confirmedHours": confirmed_hours}
        return self._invoices.create_invoice_for_vehicle(vehicle.vehicle_id, payload)

    def update_status(self, invoice_id: str, status: str) -> None:
        try:
            new_status = InvoiceStatus(status)
        except ValueError:
            raise ValidationError("Ungültiger Status")
        self._invoices.update_status(invoice_id, new_status.value)

    def delete(self, invoice_id: str) -> None:
        self._invoices.delete(invoice_id)

    def upload_pdf(self, invoice: Invoice, pdf_bytes: bytes) -> bool:
        """Attach the rendered PDF; returns False when the upload failed."""
        upload = Upload(filename=f"{invoice.document_number}.pdf", content=pdf_bytes, mimetype="application/pdf")
        try:
            self._invoices.upload_pdf(invoice.invoice_id, upload)
        except ApiError as e:
            logger.warning("PDF upload for invoice %s failed: %s", invoice.invoice_id, e)
            return False
        return True
