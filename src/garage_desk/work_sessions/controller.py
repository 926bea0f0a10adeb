from __future__ import annotations

import io
import logging
from datetime import date, datetime

import qrcode
from flask import Flask, current_app, flash, jsonify, redirect, render_template, request, send_file, url_for
from PIL import Image, UnidentifiedImageError
from pyzbar.pyzbar import decode as pyzbar_decode

from ..common.web import admin_required, current_worker, flash_error, login_required, month_args, period_arg
from ..container import Container
from ..core.enums import FilterPeriod
from ..core.exceptions import ApiError, DomainError, UnauthorizedError, ValidationError, get_error_message

logger = logging.getLogger(__name__)


def _qr_png(data: str) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf


def register(app: Flask, container: Container) -> None:
    service = container.work_session_service

    def _worker_id() -> str:
        return str(current_worker()["id"])

    @app.route("/check-in", endpoint="check_in")
    @login_required
    def check_in():
        active = None
        try:
            active = service.get_active()
        except (DomainError, ApiError) as e:
            flash_error(e, "Status konnte nicht geladen werden")
        return render_template(
            "check_in.html",
            active=active,
            elapsed=service.elapsed(active),
            active_page="check_in",
        )

    @app.route("/check-in", methods=["POST"], endpoint="do_check_in")
    @login_required
    def do_check_in():
        try:
            service.check_in()
            flash("Erfolgreich eingecheckt!", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e, "Fehler beim Einchecken")
        except Exception:
            logger.exception("Check-in failed")
            flash("Fehler beim Einchecken", "danger")
        return redirect(url_for("check_in"))

    @app.route("/check-out", methods=["POST"], endpoint="do_check_out")
    @login_required
    def do_check_out():
        try:
            closed = service.check_out()
            flash(f"Ausgecheckt! {closed.hours or 0:.2f}h erfasst.", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e, "Fehler beim Auschecken")
        except Exception:
            logger.exception("Check-out failed")
            flash("Fehler beim Auschecken", "danger")
        return redirect(url_for("check_in"))

    @app.route("/time-logs", endpoint="time_logs")
    @login_required
    def time_logs():
        period = period_arg(request.args, FilterPeriod.WEEK)
        data = {"rows": [], "total_hours": "0.00", "count": 0}
        try:
            data = service.history_ui(_worker_id(), period=period)
        except ApiError as e:
            flash_error(e, "Zeiterfassungen konnten nicht geladen werden")
        return render_template(
            "time_logs.html",
            data=data,
            period=period.value,
            today=date.today().isoformat(),
            active_page="time_logs",
        )

    @app.route("/time-logs/manual", methods=["POST"], endpoint="manual_entry")
    @login_required
    def manual_entry():
        f = request.form
        try:
            blocks = service.record_manual(
                work_date=f.get("date", ""),
                block1_start=f.get("block1_start", ""),
                block1_end=f.get("block1_end", ""),
                block2_start=f.get("block2_start", ""),
                block2_end=f.get("block2_end", ""),
            )
            total = sum(b.hours for b in blocks)
            flash(f"Arbeitszeit erfasst: {total:.2f}h", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e, "Arbeitszeit konnte nicht gespeichert werden")
        except Exception:
            logger.exception("Manual time entry failed")
            flash("Arbeitszeit konnte nicht gespeichert werden", "danger")
        return redirect(url_for("time_logs"))

    @app.route("/time-logs/calendar", endpoint="time_logs_calendar")
    @login_required
    def time_logs_calendar():
        today = date.today()
        year, month = month_args(request.args, today)
        selected = None
        if request.args.get("day"):
            try:
                selected = datetime.strptime(request.args["day"], "%Y-%m-%d").date()
            except ValueError:
                selected = None

        grid = None
        day_sessions = []
        try:
            grid = service.calendar(_worker_id(), year=year, month=month)
            if selected:
                day_sessions = service.sessions_on(_worker_id(), selected)
        except ApiError as e:
            flash_error(e, "Kalender konnte nicht geladen werden")

        return render_template(
            "time_logs_calendar.html",
            grid=grid,
            selected=selected,
            day_sessions=day_sessions,
            day_hours=service.day_hours(day_sessions),
            hours_of=service.day_hours,
            active_page="time_logs_calendar",
        )

    @app.route("/qr", endpoint="qr_scan_page")
    @login_required
    def qr_scan_page():
        return render_template("qr_scan.html", active_page="qr")

    @app.route("/qr/poster.png", endpoint="qr_poster")
    @admin_required
    def qr_poster():
        """Printable check-in poster for the workshop wall."""
        buf = _qr_png(current_app.config.get("QR_TOKEN", "GARAGE_CHECKIN"))
        return send_file(buf, mimetype="image/png")

    def _scan(code: str):
        if code != current_app.config.get("QR_TOKEN", "GARAGE_CHECKIN"):
            return jsonify({"success": False, "message": "Ungültiger QR-Code"}), 400
        try:
            result = service.toggle()
        except UnauthorizedError as e:
            logger.warning("401 from %s during QR scan", e.path)
            return jsonify({"success": False, "message": "Sitzung abgelaufen. Bitte erneut anmelden."}), 401
        except (DomainError, ApiError) as e:
            return jsonify({"success": False, "message": get_error_message(e)}), 400
        return jsonify({"success": True, "action": result.action, "message": result.message}), 200

    @app.route("/api/qr/checkin", methods=["POST"], endpoint="api_qr_checkin")
    @login_required
    def api_qr_checkin():
        data = request.get_json(silent=True) or {}
        code = str(data.get("qr_code", "")).strip()
        if not code:
            return jsonify({"success": False, "message": "QR-Code darf nicht leer sein"}), 400
        return _scan(code)

    @app.route("/api/qr/checkin/image", methods=["POST"], endpoint="api_qr_checkin_image")
    @login_required
    def api_qr_checkin_image():
        file = request.files.get("image")
        if not file or not file.filename:
            return jsonify({"success": False, "message": "Bitte ein Bild hochladen"}), 400

        try:
            img = Image.open(file.stream).convert("RGB")
        except (UnidentifiedImageError, OSError):
            return jsonify({"success": False, "message": "Bild konnte nicht gelesen werden"}), 400

        decoded = pyzbar_decode(img)
        if not decoded:
            return jsonify({"success": False, "message": "Kein QR-Code im Bild gefunden"}), 400
        return _scan(decoded[0].data.decode("utf-8").strip())
