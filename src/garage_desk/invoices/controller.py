from __future__ import annotations

import csv
import io
import logging
from datetime import date

from flask import Flask, flash, redirect, render_template, request, send_file, url_for

from ..common.web import admin_required, flash_error, period_arg
from ..container import Container
from ..core.enums import FilterPeriod, InvoiceStatus, InvoiceType
from ..core.exceptions import ApiError, DomainError, ValidationError
from .model import Customer, Invoice
from .pdf import render_invoice_pdf
from .service import parse_items

logger = logging.getLogger(__name__)

CSV_FIELDS = ["Rechnungsnummer", "Typ", "Status", "Kunde", "Fahrzeug", "Gesamtbetrag", "Datum"]


def _csv_row(inv: Invoice) -> dict:
    return {
        "Rechnungsnummer": inv.invoice_number,
        "Typ": inv.type.label,
        "Status": inv.status.label,
        "Kunde": inv.customer_name,
        "Fahrzeug": inv.vehicle.label if inv.vehicle else "",
        "Gesamtbetrag": f"{inv.total:.2f}",
        "Datum": inv.created_at.strftime("%d.%m.%Y") if inv.created_at else "",
    }


def register(app: Flask, container: Container) -> None:
    invoices = container.invoice_service

    def _filtered():
        return invoices.list(
            vehicle_id=request.args.get("vehicle_id") or None,
            period=period_arg(request.args, FilterPeriod.ALL),
            status=request.args.get("status", "all"),
            invoice_type=request.args.get("type", "all"),
        )

    def _render_pdf(invoice: Invoice) -> bytes:
        return render_invoice_pdf(invoice, company=container.company)

    @app.route("/invoices", endpoint="invoices")
    @admin_required
    def invoice_list():
        items = []
        try:
            items = _filtered()
        except ApiError as e:
            flash_error(e, "Rechnungen konnten nicht geladen werden")
        return render_template(
            "invoices.html",
            invoices=items,
            period=period_arg(request.args, FilterPeriod.ALL).value,
            status=request.args.get("status", "all"),
            invoice_type=request.args.get("type", "all"),
            statuses=list(InvoiceStatus),
            types=list(InvoiceType),
            active_page="invoices",
        )

    @app.route("/invoices/export.csv", endpoint="invoices_export")
    @admin_required
    def invoices_export():
        try:
            items = _filtered()
        except ApiError as e:
            flash_error(e, "Export fehlgeschlagen")
            return redirect(url_for("invoices"))

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS, delimiter=";", lineterminator="\n")
        writer.writeheader()
        for inv in items:
            writer.writerow(_csv_row(inv))

        filename = f"rechnungen_{date.today().strftime('%Y-%m-%d')}.csv"
        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/invoices/new", methods=["GET", "POST"], endpoint="invoice_new")
    @admin_required
    def invoice_new():
        vehicle_id = request.values.get("vehicle_id", "")
        try:
            invoice_type = InvoiceType(request.values.get("type", InvoiceType.INVOICE.value))
        except ValueError:
            invoice_type = InvoiceType.INVOICE

        vehicle = None
        vehicle_list = []
        try:
            vehicle_list = container.vehicle_service.list(active_only=True)
            if vehicle_id:
                vehicle = container.vehicle_service.get(vehicle_id)
        except (DomainError, ApiError) as e:
            flash_error(e, "Fahrzeug konnte nicht geladen werden")

        if request.method == "GET":
            items = []
            if vehicle:
                try:
                    items = invoices.draft_items(vehicle, invoice_type)
                except ApiError as e:
                    flash_error(e, "Daten konnten nicht geladen werden")
            customer = Customer(name=vehicle.customer_name or "", email=vehicle.customer_email) if vehicle else None
            return render_template(
                "invoice_form.html",
                invoice_type=invoice_type,
                vehicle=vehicle,
                vehicles=vehicle_list,
                customer=customer,
                items=items,
                totals=invoices.totals(items),
                tax_rate=invoices.default_tax_rate,
                notes="",
                active_page="invoices",
            )

        f = request.form
        items = parse_items(f.getlist("description"), f.getlist("quantity"), f.getlist("unit_price"))
        customer = Customer.from_form(f)
        try:
            invoice = invoices.create(
                invoice_type=invoice_type.value,
                vehicle_id=vehicle_id,
                customer=customer,
                items=items,
                tax_rate=f.get("taxRate"),
                notes=f.get("notes"),
            )
        except (DomainError, ApiError) as e:
            flash_error(e, "Dokument konnte nicht erstellt werden")
            return render_template(
                "invoice_form.html",
                invoice_type=invoice_type,
                vehicle=vehicle,
                vehicles=vehicle_list,
                customer=customer,
                items=items,
                totals=invoices.totals(items),
                tax_rate=f.get("taxRate") or invoices.default_tax_rate,
                notes=f.get("notes", ""),
                active_page="invoices",
            )

        label = "Angebot" if invoice.is_estimate else "Rechnung"
        try:
            pdf_bytes = _render_pdf(invoice)
        except Exception:
            logger.exception("PDF rendering for %s failed", invoice.invoice_id)
            pdf_bytes = None

        if pdf_bytes and invoices.upload_pdf(invoice, pdf_bytes):
            flash(f"{label} erstellt und PDF gespeichert!", "success")
        else:
            flash(f"{label} erstellt, PDF konnte nicht gespeichert werden", "warning")
        return redirect(url_for("invoice_detail", invoice_id=invoice.invoice_id))

    @app.route("/invoices/<invoice_id>", endpoint="invoice_detail")
    @admin_required
    def invoice_detail(invoice_id: str):
        try:
            invoice = invoices.get(invoice_id)
        except (DomainError, ApiError) as e:
            flash_error(e, "Rechnung nicht gefunden")
            return redirect(url_for("invoices"))
        return render_template(
            "invoice_detail.html",
            invoice=invoice,
            statuses=list(InvoiceStatus),
            active_page="invoices",
        )

    @app.route("/invoices/<invoice_id>/pdf", endpoint="invoice_pdf")
    @admin_required
    def invoice_pdf(invoice_id: str):
        try:
            invoice = invoices.get(invoice_id)
        except (DomainError, ApiError) as e:
            flash_error(e, "Rechnung nicht gefunden")
            return redirect(url_for("invoices"))

        return send_file(
            io.BytesIO(_render_pdf(invoice)),
            mimetype="application/pdf",
            as_attachment=request.args.get("download") == "1",
            download_name=f"{invoice.document_number}.pdf",
        )

    @app.route("/invoices/<invoice_id>/upload-pdf", methods=["POST"], endpoint="invoice_upload_pdf")
    @admin_required
    def invoice_upload_pdf(invoice_id: str):
        try:
            invoice = invoices.get(invoice_id)
        except (DomainError, ApiError) as e:
            flash_error(e, "Rechnung nicht gefunden")
            return redirect(url_for("invoices"))

        if invoices.upload_pdf(invoice, _render_pdf(invoice)):
            flash("PDF gespeichert", "success")
        else:
            flash("PDF konnte nicht gespeichert werden", "danger")
        return redirect(url_for("invoice_detail", invoice_id=invoice_id))

    @app.route("/invoices/<invoice_id>/status", methods=["POST"], endpoint="invoice_status")
    @admin_required
    def invoice_status(invoice_id: str):
        try:
            invoices.update_status(invoice_id, request.form.get("status", ""))
            flash("Status aktualisiert", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e, "Status konnte nicht aktualisiert werden")
        return redirect(url_for("invoice_detail", invoice_id=invoice_id))

    @app.route("/invoices/<invoice_id>/delete", methods=["POST"], endpoint="invoice_delete")
    @admin_required
    def invoice_delete(invoice_id: str):
        try:
            invoices.delete(invoice_id)
            flash("Rechnung gelöscht", "success")
        except ApiError as e:
            flash_error(e, "Rechnung konnte nicht gelöscht werden")
            return redirect(url_for("invoice_detail", invoice_id=invoice_id))
        return redirect(url_for("invoices"))
