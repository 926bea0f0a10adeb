from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import InvoiceStatus, InvoiceType
from ..vehicles.model import VehicleRef


@dataclass(frozen=True)
class InvoiceItem:
    description: str
    quantity: float
    unit_price: float
    total: float

    def to_payload(self) -> dict:
        return {
            "description": self.description,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "total": self.total,
        }


@dataclass(frozen=True)
class Totals:
    subtotal: float
    tax_amount: float
    total: float


@dataclass(frozen=True)
class Invoice:
    """Rechnung oder Offerte (estimate) for one vehicle."""

    invoice_id: str
    invoice_number: str
    type: InvoiceType
    status: InvoiceStatus
    customer_name: str
    created_at: Optional[datetime]
    items: Sequence[InvoiceItem] = field(default_factory=tuple)
    subtotal: float = 0.0
    tax_rate: float = 0.0
    tax_amount: float = 0.0
    total: float = 0.0
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    notes: Optional[str] = None
    vehicle: Optional[VehicleRef] = None
    pdf_url: Optional[str] = None

    @property
    def is_estimate(self) -> bool:
        return self.type == InvoiceType.ESTIMATE

    @property
    def document_number(self) -> str:
        if self.is_estimate:
            return self.invoice_number.replace("INV-", "EST-")
        return self.invoice_number


@dataclass(frozen=True)
class Customer:
    name: str
    email: Optional[str] = None
    address: Optional[str] = None

    @classmethod
    def from_form(cls, form) -> "Customer":
        return cls(
            name=(form.get("customerName") or "").strip(),
            email=(form.get("customerEmail") or "").strip() or None,
            address=(form.get("customerAddress") or "").strip() or None,
        )

    def to_payload(self) -> dict:
        return {"customerName": self.name, "customerEmail": self.email, "customerAddress": self.address}
