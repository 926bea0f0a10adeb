from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import flash_error, login_required
from ..container import Container
from ..core.exceptions import ApiError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/car-time-logs", endpoint="car_time_logs")
    @login_required
    def car_time_logs():
        vehicles = []
        try:
            vehicles = container.vehicle_service.list(active_only=True)
        except ApiError as e:
            flash_error(e, "Fahrzeuge konnten nicht geladen werden")
        return render_template(
            "car_time_logs.html",
            vehicles=vehicles,
            selected=request.args.get("vehicle_id", ""),
            active_page="car_time_logs",
        )

    @app.route("/car-time-logs", methods=["POST"], endpoint="log_car_hours")
    @login_required
    def log_car_hours():
        vehicle_id = request.form.get("vehicle_id", "")
        try:
            log = container.time_log_service.log_hours(
                vehicle_id=vehicle_id,
                hours=request.form.get("hours"),
                notes=request.form.get("notes"),
            )
            flash(f"{log.hours:g} Stunden erfolgreich erfasst!", "success")
            return redirect(url_for("car_time_logs"))
        except (ValidationError, ApiError) as e:
            flash_error(e, "Fehler beim Erfassen der Zeit")
        except Exception:
            logger.exception("Logging hours for vehicle %s failed", vehicle_id)
            flash("Fehler beim Erfassen der Zeit", "danger")
        return redirect(url_for("car_time_logs", vehicle_id=vehicle_id))
