from __future__ import annotations

import logging
from datetime import date, datetime

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import flash_error, login_required, month_args
from ..container import Container
from ..core.enums import AppointmentStatus, ServiceType
from ..core.exceptions import ApiError, ValidationError
from .service import STATUS_COLORS, STATUS_LABELS

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    appointments = container.appointment_service

    @app.route("/appointments/calendar", endpoint="appointments_calendar")
    @login_required
    def appointments_calendar():
        today = date.today()
        year, month = month_args(request.args, today)
        status = request.args.get("status", "all")
        vehicle_id = request.args.get("vehicle_id", "all")
        try:
            selected = datetime.strptime(request.args.get("day", ""), "%Y-%m-%d").date()
        except ValueError:
            selected = None

        items, vehicles = [], []
        try:
            items = list(appointments.list())
            vehicles = container.vehicle_service.list(active_only=True)
        except ApiError as e:
            flash_error(e, "Termine konnten nicht geladen werden")

        events = appointments.events(items, status=status, vehicle_id=vehicle_id)
        editing = None
        if request.args.get("edit"):
            editing = next((a for a in items if a.appointment_id == request.args["edit"]), None)

        return render_template(
            "appointments_calendar.html",
            grid=appointments.month(events, year=year, month=month),
            selected=selected,
            day_appointments=appointments.for_day(items, selected) if selected else [],
            counts=appointments.count_by_status(items),
            status=status,
            vehicle_id=vehicle_id,
            vehicles=vehicles,
            editing=editing,
            service_types=list(ServiceType),
            statuses=list(AppointmentStatus),
            status_colors=STATUS_COLORS,
            status_labels=STATUS_LABELS,
            default_date=(selected or today).isoformat(),
            active_page="appointments",
        )

    @app.route("/appointments", methods=["POST"], endpoint="appointment_save")
    @login_required
    def appointment_save():
        appointment_id = request.form.get("appointment_id") or None
        try:
            appointments.save(request.form, appointment_id)
            flash("Termin aktualisiert" if appointment_id else "Termin erstellt", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e, "Termin konnte nicht gespeichert werden")
        except Exception:
            logger.exception("Saving appointment failed")
            flash("Termin konnte nicht gespeichert werden", "danger")
        return redirect(url_for("appointments_calendar", day=request.form.get("date") or None))

    @app.route("/appointments/<appointment_id>/delete", methods=["POST"], endpoint="appointment_delete")
    @login_required
    def appointment_delete(appointment_id: str):
        try:
            appointments.delete(appointment_id)
            flash("Termin gelöscht", "success")
        except ApiError as e:
            flash_error(e, "Termin konnte nicht gelöscht werden")
        return redirect(url_for("appointments_calendar"))
