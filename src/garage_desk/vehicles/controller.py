from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.uploads import Upload
from ..common.web import admin_required, flash_error, is_admin, login_required
from ..container import Container
from ..core.enums import InvoiceStatus, ServiceType, VehicleStatus
from ..core.exceptions import ApiError, DomainError, ValidationError
from ..invoices.model import Customer

logger = logging.getLogger(__name__)

FORM_ACTIONS = ("save", "decode", "extract")


def register(app: Flask, container: Container) -> None:
    vehicles = container.vehicle_service

    def _render_form(form: dict, *, vehicle=None, image_url=None, recognized=None):
        return render_template(
            "vehicle_form.html",
            form=form,
            vehicle=vehicle,
            image_url=image_url,
            recognized=recognized or [],
            service_types=list(ServiceType),
            active_page="vehicles",
        )

    @app.route("/vehicles", endpoint="vehicles")
    @login_required
    def vehicle_list():
        status = request.args.get("status", "all")
        query = (request.args.get("q") or "").strip().lower()
        items = []
        try:
            items = list(vehicles.list())
        except ApiError as e:
            flash_error(e, "Fahrzeuge konnten nicht geladen werden")

        if status != "all":
            items = [v for v in items if v.status and v.status.value == status]
        if query:
            items = [
                v
                for v in items
                if query in v.vin.lower()
                or query in v.label.lower()
                or query in (v.customer_name or "").lower()
                or query in (v.license_plate or "").lower()
            ]
        return render_template(
            "vehicles.html",
            vehicles=items,
            status=status,
            q=query,
            statuses=list(VehicleStatus),
            active_page="vehicles",
        )

    @app.route("/vehicles/new", methods=["GET", "POST"], endpoint="vehicle_new")
    @login_required
    def vehicle_new():
        if request.method == "GET":
            return _render_form({"status": VehicleStatus.ON_HOLD.value})

        form = request.form.to_dict()
        action = form.pop("action", "save")
        if action not in FORM_ACTIONS:
            action = "save"

        try:
            if action == "decode":
                decoded = vehicles.decode_vin(form.get("vin", ""), form)
                flash("Fahrzeugdaten erfolgreich geladen!", "success")
                return _render_form(decoded.form, image_url=decoded.image_url)

            if action == "extract":
                document = Upload.from_file_storage(request.files.get("document_photo"))
                decoded = vehicles.extract_from_document(document, form)
                flash(f"Erkannt: {', '.join(decoded.recognized)}", "success")
                return _render_form(decoded.form, image_url=decoded.image_url, recognized=decoded.recognized)

            vehicle = vehicles.create(
                form,
                vehicle_photo=Upload.from_file_storage(request.files.get("vehicle_photo")),
                document_photo=Upload.from_file_storage(request.files.get("document_photo")),
            )
        except (DomainError, ApiError) as e:
            flash_error(e, "Fahrzeug konnte nicht gespeichert werden")
            return _render_form(form)
        except Exception:
            logger.exception("Vehicle intake failed")
            flash("Fahrzeug konnte nicht gespeichert werden", "danger")
            return _render_form(form)

        flash("Fahrzeug erfolgreich erfasst!", "success")
        return redirect(url_for("vehicle_detail", vehicle_id=vehicle.vehicle_id))

    @app.route("/vehicles/<vehicle_id>", endpoint="vehicle_detail")
    @login_required
    def vehicle_detail(vehicle_id: str):
        try:
            vehicle = vehicles.get(vehicle_id)
        except (DomainError, ApiError) as e:
            flash_error(e, "Fahrzeug nicht gefunden")
            return redirect(url_for("vehicles"))

        logs, invoices, expenses = [], [], []
        try:
            logs = list(container.time_log_service.list(vehicle_id=vehicle_id))
            expenses = list(container.expense_service.for_vehicle(vehicle_id))
            if is_admin():
                invoices = container.invoice_service.list(vehicle_id=vehicle_id)
        except ApiError as e:
            flash_error(e, "Fahrzeugdaten konnten nicht vollständig geladen werden")

        hourly_rate = container.invoice_service.hourly_rate
        return render_template(
            "vehicle_detail.html",
            vehicle=vehicle,
            logs=logs,
            logs_by_user=container.time_log_service.group_by_user(logs),
            total_hours=round(sum(t.hours for t in logs), 2),
            invoices=invoices,
            paid_revenue=round(sum(i.total for i in invoices if i.status == InvoiceStatus.PAID), 2),
            expenses=expenses,
            total_expenses=round(sum(e.amount for e in expenses), 2),
            hourly_rate=hourly_rate,
            statuses=list(VehicleStatus),
            tab=request.args.get("tab", "overview"),
            active_page="vehicles",
        )

    @app.route("/vehicles/<vehicle_id>/edit", methods=["GET", "POST"], endpoint="vehicle_edit")
    @login_required
    def vehicle_edit(vehicle_id: str):
        try:
            vehicle = vehicles.get(vehicle_id)
        except (DomainError, ApiError) as e:
            flash_error(e, "Fahrzeug nicht gefunden")
            return redirect(url_for("vehicles"))

        if request.method == "GET":
            form = {
                "vin": vehicle.vin,
                "brand": vehicle.brand or "",
                "model": vehicle.model or "",
                "year": str(vehicle.year or ""),
                "color": vehicle.color or "",
                "mileage": str(vehicle.mileage or ""),
                "licensePlate": vehicle.license_plate or "",
                "serviceType": vehicle.service_type or "",
                "workDescription": vehicle.work_description or "",
                "customerName": vehicle.customer_name or "",
                "customerEmail": vehicle.customer_email or "",
                "customerPhone": vehicle.customer_phone or "",
                "trim": vehicle.trim or "",
                "engine": vehicle.engine or "",
                "transmission": vehicle.transmission or "",
            }
            return _render_form(form, vehicle=vehicle)

        form = request.form.to_dict()
        form.pop("action", None)
        try:
            vehicles.update(vehicle_id, form)
        except (DomainError, ApiError) as e:
            flash_error(e, "Fahrzeug konnte nicht aktualisiert werden")
            return _render_form(form, vehicle=vehicle)

        flash("Fahrzeug erfolgreich aktualisiert", "success")
        return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id))

    @app.route("/vehicles/<vehicle_id>/status", methods=["POST"], endpoint="vehicle_status")
    @login_required
    def vehicle_status(vehicle_id: str):
        try:
            vehicles.set_status(vehicle_id, request.form.get("status", ""))
            flash("Status aktualisiert", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e, "Status konnte nicht aktualisiert werden")
        return redirect(request.referrer or url_for("vehicle_detail", vehicle_id=vehicle_id))

    @app.route("/vehicles/<vehicle_id>/delete", methods=["POST"], endpoint="vehicle_delete")
    @admin_required
    def vehicle_delete(vehicle_id: str):
        try:
            vehicles.delete(vehicle_id)
            flash("Fahrzeug gelöscht", "success")
        except ApiError as e:
            flash_error(e, "Fahrzeug konnte nicht gelöscht werden")
            return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id))
        return redirect(url_for("vehicles"))

    @app.route("/vehicles/<vehicle_id>/estimate", methods=["POST"], endpoint="vehicle_create_estimate")
    @admin_required
    def vehicle_create_estimate(vehicle_id: str):
        try:
            vehicle = vehicles.get(vehicle_id)
            estimate = container.invoice_service.create_estimate_for_vehicle(vehicle, Customer.from_form(request.form))
        except (DomainError, ApiError) as e:
            flash_error(e, "Fehler beim Erstellen des Angebots")
            return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id, tab="invoices"))

        flash("Angebot erfolgreich erstellt!", "success")
        return redirect(url_for("invoice_detail", invoice_id=estimate.invoice_id))

    @app.route("/vehicles/<vehicle_id>/invoice", methods=["POST"], endpoint="vehicle_create_invoice")
    @admin_required
    def vehicle_create_invoice(vehicle_id: str):
        try:
            vehicle = vehicles.get(vehicle_id)
            invoice = container.invoice_service.create_invoice_for_vehicle(vehicle, Customer.from_form(request.form))
        except (DomainError, ApiError) as e:
            flash_error(e, "Fehler beim Erstellen der Rechnung")
            return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id, tab="invoices"))

        flash("Rechnung erfolgreich erstellt!", "success")
        return redirect(url_for("invoice_detail", invoice_id=invoice.invoice_id))
