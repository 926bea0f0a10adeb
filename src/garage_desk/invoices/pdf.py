"""Invoice / estimate PDF rendered client-side with reportlab.

Layout coordinates are in millimetres measured from the top-left corner of
an A4 page; :class:`_Page` converts them to reportlab's bottom-left points.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from reportlab.lib.colors import Color
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from ..core.constants import ESTIMATE_VALID_DAYS
from .model import Invoice


def _rgb(r: int, g: int, b: int) -> Color:
    return Color(r / 255, g / 255, b / 255)


BLUE = _rgb(2, 132, 199)
LIGHT_BLUE = _rgb(241, 245, 249)
ROW_ALT = _rgb(248, 250, 252)
VEHICLE_BOX = _rgb(250, 250, 250)
DETAIL_GREY = _rgb(60, 60, 60)
RULE_GREY = _rgb(200, 200, 200)
FOOTER_GREY = _rgb(150, 150, 150)
WHITE = _rgb(255, 255, 255)
BLACK = _rgb(0, 0, 0)

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

PAGE_W = A4[0] / mm
PAGE_H = A4[1] / mm
MARGIN = 20

# Table column anchors
TABLE_X = MARGIN + 10
DESC_WIDTH = 75
QTY_X = 100
UNIT_X = 120
PRICE_X = 145
TOTAL_X = PAGE_W - MARGIN - 2
ROW_HEIGHT = 7
WRAP_LINE_HEIGHT = 4
TABLE_W = PAGE_W - 2 * MARGIN - 8
ITEMS_BOTTOM = PAGE_H - 70

INTRO_ESTIMATE = "Vielen Dank für Ihre Anfrage! Wir freuen uns, Ihnen folgende Offerte zu unterbreiten:"
INTRO_INVOICE = "Im Folgenden finden Sie die Details zu Ihrer Rechnung:"
CLOSING_ESTIMATE = "Bei Fragen stehen wir Ihnen jederzeit gerne zur Verfügung."


@dataclass(frozen=True)
class CompanyInfo:
    name: str = "Ocean Garage"
    tagline: str = "Fahrzeugreparatur & Service"
    country: str = "Schweiz"
    brand: str = "OCEANCAR"

    @property
    def footer(self) -> str:
        return f"{self.name} - {self.tagline}"


def chf(amount: float) -> str:
    return f"CHF {amount:.2f}"


def format_quantity(value: float) -> str:
    return f"{value:g}"


class _NumberedCanvas(canvas.Canvas):
    """Canvas that knows the page count when drawing footers."""

    def __init__(self, *args, company: CompanyInfo, **kwargs):
        super().__init__(*args, **kwargs)
        self._company = company
        self._saved_pages: list[dict] = []

    def showPage(self):
        self._saved_pages.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_pages)
        for index, state in enumerate(self._saved_pages, start=1):
            self.__dict__.update(state)
            self._draw_footer(index, total)
            super().showPage()
        super().save()

    def _draw_footer(self, page: int, total: int) -> None:
        self.setFont(FONT, 8)
        self.setFillColor(FOOTER_GREY)
        self.drawCentredString(PAGE_W / 2 * mm, 10 * mm, f"Seite {page} von {total}")
        self.drawCentredString(PAGE_W / 2 * mm, 5 * mm, self._company.footer)


class _Page:
    """Drawing helpers in top-left millimetre coordinates."""

    def __init__(self, c: canvas.Canvas):
        self.c = c

    def text(self, value: str, x: float, y: float, *, align: str = "left") -> None:
        px, py = x * mm, (PAGE_H - y) * mm
        if align == "right":
            self.c.drawRightString(px, py, value)
        elif align == "center":
            self.c.drawCentredString(px, py, value)
        else:
            self.c.drawString(px, py, value)

    def rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        self.c.setFillColor(color)
        self.c.rect(x * mm, (PAGE_H - y - h) * mm, w * mm, h * mm, stroke=0, fill=1)

    def line(self, x1: float, y: float, x2: float, *, color: Color, width: float) -> None:
        self.c.setStrokeColor(color)
        self.c.setLineWidth(width * mm)
        self.c.line(x1 * mm, (PAGE_H - y) * mm, x2 * mm, (PAGE_H - y) * mm)

    def font(self, name: str, size: float, color: Color = BLACK) -> None:
        self.c.setFont(name, size)
        self.c.setFillColor(color)

    def wrap(self, value: str, size: float, width: float, name: str = FONT) -> list[str]:
        return simpleSplit(value, name, size, width * mm) or [""]

    def new_page(self) -> None:
        self.c.showPage()


def render_invoice_pdf(
    invoice: Invoice,
    *,
    company: Optional[CompanyInfo] = None,
    today: Optional[date] = None,
) -> bytes:
    """Render an invoice or estimate to PDF bytes."""
    company = company or CompanyInfo()
    today = today or date.today()
    buf = io.BytesIO()
    c = _NumberedCanvas(buf, pagesize=A4, company=company)
    c.setTitle(invoice.document_number)
    c.setAuthor(company.name)
    page = _Page(c)

    y = _draw_header(page, invoice, company, today)
    y = _draw_parties(page, invoice, y)
    y = _draw_items(page, invoice, y)
    y = _draw_totals(page, invoice, y)
    _draw_closing(page, invoice, y)

    c.showPage()
    c.save()
    return buf.getvalue()


def _draw_header(page: _Page, invoice: Invoice, company: CompanyInfo, today: date) -> float:
    y = MARGIN
    page.rect(MARGIN, y, 4, PAGE_H - MARGIN * 2, BLUE)

    page.font(FONT_BOLD, 28, BLUE)
    page.text(company.brand, MARGIN + 8, y + 12)
    y += 25

    right = PAGE_W - MARGIN
    page.font(FONT_BOLD, 12)
    page.text(company.name, right, y - 18, align="right")
    page.font(FONT, 10)
    for idx, line in enumerate((company.tagline, company.country)):
        page.text(line, right, y - 10 + idx * 5, align="right")
    y += 15

    page.font(FONT_BOLD, 32, BLUE)
    page.text("ANGEBOT" if invoice.is_estimate else "RECHNUNG", right, y, align="right")
    y += 10

    page.font(FONT, 9, DETAIL_GREY)
    number_label = "Offerten-Nr." if invoice.is_estimate else "Rechnungs-Nr."
    page.text(f"{number_label}: {invoice.document_number}", right, y, align="right")
    created = invoice.created_at.date() if invoice.created_at else today
    page.text(f"Datum: {created.strftime('%d.%m.%Y')}", right, y + 5, align="right")
    if invoice.is_estimate:
        valid_until = today + timedelta(days=ESTIMATE_VALID_DAYS)
        page.text(f"Gültig bis: {valid_until.strftime('%d.%m.%Y')}", right, y + 10, align="right")
    return y + 18


def _draw_parties(page: _Page, invoice: Invoice, y: float) -> float:
    if invoice.customer_address:
        customer_h = 35
    elif invoice.customer_email:
        customer_h = 28
    else:
        customer_h = 22
    page.rect(MARGIN + 8, y, 75, customer_h, LIGHT_BLUE)

    page.font(FONT_BOLD, 10, BLUE)
    page.text(invoice.customer_name, MARGIN + 10, y + 6)
    page.font(FONT, 9)
    line_y = y + 11
    if invoice.customer_email:
        page.text(invoice.customer_email, MARGIN + 10, line_y)
        line_y += 5
    if invoice.customer_address:
        for line in invoice.customer_address.split("\n"):
            page.text(line.rstrip("\r"), MARGIN + 10, line_y)
            line_y += 5

    vehicle = invoice.vehicle
    has_model = bool(vehicle and vehicle.brand and vehicle.model)
    vehicle_h = 25 if has_model else 20
    box_x = PAGE_W - MARGIN - 75
    page.rect(box_x, y, 75, vehicle_h, VEHICLE_BOX)

    page.font(FONT_BOLD, 9)
    page.text("Fahrzeug:", box_x + 2, y + 6)
    page.font(FONT, 9)
    if has_model:
        page.text(f"{vehicle.brand} {vehicle.model}", box_x + 2, y + 11)
        page.text(f"VIN: {vehicle.vin}", box_x + 2, y + 16)
    else:
        vin = vehicle.vin if vehicle and vehicle.vin else "N/A"
        page.text(f"VIN: {vin}", box_x + 2, y + 11)

    y = max(customer_h, vehicle_h) + y + 15
    page.font(FONT, 10)
    page.text(INTRO_ESTIMATE if invoice.is_estimate else INTRO_INVOICE, MARGIN + 8, y)
    return y + 10


def _draw_table_header(page: _Page, y: float) -> float:
    page.rect(MARGIN + 8, y - 4, TABLE_W, ROW_HEIGHT, BLUE)
    page.font(FONT_BOLD, 9, WHITE)
    page.text("BESCHREIBUNG", TABLE_X, y)
    page.text("MENGE", QTY_X, y, align="center")
    page.text("EINHEIT", UNIT_X, y, align="center")
    page.text("PREIS", PRICE_X, y, align="right")
    page.text("TOTAL", TOTAL_X, y, align="right")
    return y + 8


def _draw_items(page: _Page, invoice: Invoice, y: float) -> float:
    y = _draw_table_header(page, y)

    for idx, item in enumerate(invoice.items):
        lines = page.wrap(item.description, 9, DESC_WIDTH - 3)
        # wrapped description lines stay inside the row's fill
        row_h = ROW_HEIGHT + WRAP_LINE_HEIGHT * (len(lines) - 1)
        if y + row_h - ROW_HEIGHT > ITEMS_BOTTOM:
            page.new_page()
            y = _draw_table_header(page, MARGIN + 10)

        page.rect(MARGIN + 8, y - 4, TABLE_W, row_h, WHITE if idx % 2 == 0 else ROW_ALT)
        page.font(FONT, 9)
        page.text(lines[0], TABLE_X, y)
        page.text(format_quantity(item.quantity), QTY_X, y, align="center")
        page.text("Stück", UNIT_X, y, align="center")
        page.text(chf(item.unit_price), PRICE_X, y, align="right")
        page.font(FONT_BOLD, 9)
        page.text(chf(item.total), TOTAL_X, y, align="right")
        page.font(FONT, 9)
        for n, line in enumerate(lines[1:], start=1):
            page.text(line, TABLE_X, y + WRAP_LINE_HEIGHT * n)
        y += row_h

    y += 5
    if y > PAGE_H - 50:
        page.new_page()
        y = MARGIN
    return y


def _draw_totals(page: _Page, invoice: Invoice, y: float) -> float:
    right = PAGE_W - MARGIN - 2
    label_x = PAGE_W - MARGIN - 60

    y += 3
    page.line(PAGE_W - MARGIN - 75, y, right, color=RULE_GREY, width=0.3)
    y += 8

    page.font(FONT, 10)
    page.text("Zwischentotal:", label_x, y, align="right")
    page.text(chf(invoice.subtotal), right, y, align="right")
    y += 7
    page.text(f"MWST ({invoice.tax_rate:g}%):", label_x, y, align="right")
    page.text(chf(invoice.tax_amount), right, y, align="right")
    y += 10

    page.rect(PAGE_W - MARGIN - 85, y - 3, 83, 8, LIGHT_BLUE)
    page.line(PAGE_W - MARGIN - 85, y - 3, right, color=BLACK, width=0.5)
    page.font(FONT_BOLD, 12)
    page.text("Gesamtbetrag:", label_x, y + 2, align="right")
    page.font(FONT_BOLD, 12, BLUE)
    page.text(chf(invoice.total), right, y + 2, align="right")
    return y + 15


def _draw_closing(page: _Page, invoice: Invoice, y: float) -> None:
    if invoice.is_estimate:
        page.font(FONT, 9)
        page.text(CLOSING_ESTIMATE, MARGIN + 8, y)
        y += 8

    if not invoice.notes:
        return

    if y > PAGE_H - 40:
        page.new_page()
        y = MARGIN
    page.font(FONT_BOLD, 9)
    page.text("Bemerkungen:", MARGIN, y)
    y += 6
    page.font(FONT, 9)
    lines = []
    for paragraph in invoice.notes.split("\n"):
        lines.extend(page.wrap(paragraph, 9, PAGE_W - 2 * MARGIN))
    for line in lines:
        if y > PAGE_H - 20:
            page.new_page()
            page.font(FONT, 9)
            y = MARGIN
        page.text(line, MARGIN, y)
        y += 5
