from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.web import (
    SESSION_TOKEN,
    SESSION_USER,
    SESSION_WORKER,
    SESSION_WORKER_TOKEN,
    clear_identity,
    current_firm_user,
    current_worker,
    firm_login_required,
    flash_error,
)
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ApiConnectionError, ApiError, DomainError, UnauthorizedError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.errorhandler(UnauthorizedError)
    def handle_unauthorized(e: UnauthorizedError):
        if current_worker():
            # A selected worker keeps the session; the action just failed.
            logger.warning("401 from %s while worker selected", e.path)
            return render_template("error.html", message=e.message or "Keine Berechtigung"), 401

        clear_identity()
        flash("Sitzung abgelaufen. Bitte erneut anmelden.", "warning")
        return redirect(url_for("login"))

    @app.errorhandler(ApiConnectionError)
    def handle_unreachable(e: ApiConnectionError):
        return render_template("error.html", message=e.message), 503

    @app.route("/", endpoint="index")
    def index():
        if not current_firm_user():
            return redirect(url_for("login"))
        if not current_worker():
            return redirect(url_for("worker_selection"))
        if current_worker().get("role") == Role.ADMIN.value:
            return redirect(url_for("dashboard"))
        return redirect(url_for("check_in"))

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if request.method == "GET":
            if current_firm_user():
                return redirect(url_for("index"))
            return render_template("login.html")

        email = request.form.get("email", "")
        password = request.form.get("password", "")
        try:
            result = container.auth_service.login(email, password)
        except (DomainError, ApiError) as e:
            flash_error(e, "Anmeldung fehlgeschlagen")
            return render_template("login.html", email=email)

        clear_identity()
        session.permanent = True
        session[SESSION_TOKEN] = result.access_token
        session[SESSION_USER] = result.user.to_session()
        flash("Erfolgreich angemeldet!", "success")
        return redirect(url_for("worker_selection"))

    @app.route("/register", methods=["GET", "POST"], endpoint="register")
    def register_account():
        if request.method == "GET":
            return render_template("register.html")

        try:
            container.auth_service.register(
                email=request.form.get("email", ""),
                password=request.form.get("password", ""),
                name=request.form.get("name"),
            )
        except (DomainError, ApiError) as e:
            flash_error(e, "Registrierung fehlgeschlagen")
            return render_template("register.html", form=request.form)

        flash("Registrierung erfolgreich! Bitte bestätigen Sie Ihre E-Mail-Adresse.", "success")
        return redirect(url_for("login"))

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        container.auth_service.logout(session.get(SESSION_TOKEN))
        clear_identity()
        flash("Erfolgreich abgemeldet", "info")
        return redirect(url_for("login"))

    @app.route("/workers", endpoint="worker_selection")
    @firm_login_required
    def worker_selection():
        workers = []
        try:
            workers = container.auth_service.list_workers()
        except ApiError as e:
            flash_error(e, "Mitarbeiter konnten nicht geladen werden")
        return render_template("worker_selection.html", workers=workers)

    @app.route("/workers/pin", methods=["POST"], endpoint="verify_pin")
    @firm_login_required
    def verify_pin():
        try:
            worker = container.auth_service.verify_pin(
                pin=request.form.get("pin", ""),
                worker_id=request.form.get("worker_id") or None,
            )
        except (DomainError, ApiError) as e:
            flash_error(e, "Ungültiger PIN")
            return redirect(url_for("worker_selection"))

        session[SESSION_WORKER] = worker.to_session()
        # The backend accepts the worker id as bearer token after PIN check.
        session[SESSION_WORKER_TOKEN] = worker.user_id
        flash(f"Willkommen, {worker.display_name}!", "success")
        if worker.role == Role.ADMIN:
            return redirect(url_for("dashboard"))
        return redirect(url_for("check_in"))

    @app.route("/workers/switch", methods=["POST"], endpoint="switch_worker")
    @firm_login_required
    def switch_worker():
        session.pop(SESSION_WORKER, None)
        session.pop(SESSION_WORKER_TOKEN, None)
        return redirect(url_for("worker_selection"))
