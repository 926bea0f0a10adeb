from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..common.datetime_utils import parse_api_datetime
from ..common.uploads import Upload
from ..core.enums import InvoiceStatus, InvoiceType
from ..core.exceptions import NotFoundError
from ..vehicles.http_repository import to_vehicle_ref
from .model import Invoice, InvoiceItem
from .repository import InvoiceRepository


def _money(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def to_item(r: dict[str, Any]) -> InvoiceItem:
    return InvoiceItem(
        description=r.get("description") or "",
        quantity=_money(r.get("quantity")),
        unit_price=_money(r.get("unitPrice")),
        total=_money(r.get("total")),
    )


def to_invoice(r: dict[str, Any]) -> Invoice:
    try:
        status = InvoiceStatus(r.get("status"))
    except ValueError:
        status = InvoiceStatus.DRAFT
    try:
        kind = InvoiceType(r.get("type"))
    except ValueError:
        kind = InvoiceType.INVOICE

    return Invoice(
        invoice_id=str(r["id"]),
        invoice_number=r.get("invoiceNumber") or "",
        type=kind,
        status=status,
        customer_name=r.get("customerName") or "",
        created_at=parse_api_datetime(r.get("createdAt")),
        items=tuple(to_item(i) for i in r.get("items") or []),
        subtotal=_money(r.get("subtotal")),
        tax_rate=_money(r.get("taxRate")),
        tax_amount=_money(r.get("taxAmount")),
        total=_money(r.get("total")),
        customer_email=r.get("customerEmail"),
        customer_address=r.get("customerAddress"),
        notes=r.get("notes"),
        vehicle=to_vehicle_ref(r.get("vehicle")),
        pdf_url=r.get("pdfUrl"),
    )


class HttpInvoiceRepository(InvoiceRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list(self, *, vehicle_id: Optional[str] = None) -> Sequence[Invoice]:
        rows = self._client.get("/invoices", params={"vehicleId": vehicle_id}) or []
        return [to_invoice(r) for r in rows]

    def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        try:
            r = self._client.get(f"/invoices/{invoice_id}")
        except NotFoundError:
            return None
        return to_invoice(r) if r else None

    def create(self, payload: dict[str, Any]) -> Invoice:
        return to_invoice(self._client.post("/invoices", payload))

    def update_status(self, invoice_id: str, status: str) -> None:
        self._client.patch(f"/invoices/{invoice_id}", {"status": status})

    def delete(self, invoice_id: str) -> None:
        self._client.delete(f"/invoices/{invoice_id}")

    def upload_pdf(self, invoice_id: str, pdf: Upload) -> None:
        self._client.post(f"/invoices/{invoice_id}/upload-pdf", files={"file": pdf.as_multipart()})

    def create_estimate_for_vehicle(self, vehicle_id: str, payload: dict[str, Any]) -> Invoice:
        return to_invoice(self._client.post(f"/vehicles/{vehicle_id}/create-estimate", payload))

    def create_invoice_for_vehicle(self, vehicle_id: str, payload: dict[str, Any]) -> Invoice:
        return to_invoice(self._client.post(f"/vehicles/{vehicle_id}/create-invoice", payload))
