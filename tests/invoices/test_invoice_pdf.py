from __future__ import annotations

import re
from dataclasses import replace
from datetime import date, datetime

from garage_desk.core.enums import InvoiceStatus, InvoiceType
from garage_desk.invoices.model import Invoice, InvoiceItem
from garage_desk.invoices.pdf import CompanyInfo, chf, format_quantity, render_invoice_pdf
from garage_desk.vehicles.model import VehicleRef

PAGE_RE = re.compile(rb"/Type\s*/Page\b")


def _invoice(items_count: int, *, kind=InvoiceType.INVOICE, notes=None) -> Invoice:
    items = tuple(
        InvoiceItem(description=f"Position {n} mit etwas längerer Beschreibung", quantity=1, unit_price=10, total=10)
        for n in range(items_count)
    )
    return Invoice(
        invoice_id="i1",
        invoice_number="INV-2026-0001",
        type=kind,
        status=InvoiceStatus.DRAFT,
        customer_name="Hans Muster",
        customer_email="hans@muster.ch",
        customer_address="Bahnhofstrasse 1\n8001 Zürich",
        created_at=datetime(2026, 2, 1, 9, 0),
        items=items,
        subtotal=10.0 * items_count,
        tax_rate=7.7,
        tax_amount=round(0.77 * items_count, 2),
        total=round(10.77 * items_count, 2),
        notes=notes,
        vehicle=VehicleRef(vehicle_id="v1", vin="WVWZZZ1KZAW000001", brand="VW", model="Golf"),
    )


def _pages(pdf: bytes) -> int:
    return len(PAGE_RE.findall(pdf))


def test_render_single_page_invoice():
    pdf = render_invoice_pdf(_invoice(3), today=date(2026, 2, 1))
    assert pdf.startswith(b"%PDF")
    assert _pages(pdf) == 1


def test_render_estimate_with_notes():
    pdf = render_invoice_pdf(
        _invoice(2, kind=InvoiceType.ESTIMATE, notes="Termin nach Absprache."),
        company=CompanyInfo(name="Test Garage"),
        today=date(2026, 2, 1),
    )
    assert pdf.startswith(b"%PDF")


def test_many_items_break_onto_more_pages():
    pdf = render_invoice_pdf(_invoice(80), today=date(2026, 2, 1))
    assert _pages(pdf) >= 3


def test_render_without_vehicle_or_items():
    invoice = Invoice(
        invoice_id="i2",
        invoice_number="INV-2",
        type=InvoiceType.INVOICE,
        status=InvoiceStatus.DRAFT,
        customer_name="Muster",
        created_at=None,
    )
    assert render_invoice_pdf(invoice).startswith(b"%PDF")


def test_number_formatting():
    assert chf(1234.5) == "CHF 1234.50"
    assert format_quantity(2.0) == "2"
    assert format_quantity(1.5) == "1.5"


def test_table_header_repeats_on_each_items_page(monkeypatch):
    from garage_desk.invoices import pdf

    drawn = []
    draw = pdf._draw_table_header

    def counting(page, y):
        drawn.append(y)
        return draw(page, y)

    monkeypatch.setattr(pdf, "_draw_table_header", counting)
    render_invoice_pdf(_invoice(80), today=date(2026, 2, 1))

    assert len(drawn) >= 3
    assert drawn[1:] == [pdf.MARGIN + 10] * (len(drawn) - 1)


def test_long_description_wraps_inside_one_row():
    invoice = _invoice(1)
    long_item = InvoiceItem(description="Sehr lange Beschreibung " * 12, quantity=1, unit_price=10, total=10)
    pdf_bytes = render_invoice_pdf(replace(invoice, items=(long_item,)), today=date(2026, 2, 1))
    assert _pages(pdf_bytes) == 1
