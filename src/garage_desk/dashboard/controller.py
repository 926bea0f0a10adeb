from __future__ import annotations

from flask import Flask, render_template, request

from ..common.web import admin_required, flash_error, period_arg
from ..container import Container
from ..core.enums import FilterPeriod
from ..core.exceptions import ApiError


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", endpoint="dashboard")
    @admin_required
    def dashboard():
        period = period_arg(request.args, FilterPeriod.MONTH)
        stats = None
        try:
            stats = container.dashboard_service.stats(period)
        except ApiError as e:
            flash_error(e, "Daten konnten nicht geladen werden")
        return render_template("dashboard.html", stats=stats, period=period.value, active_page="dashboard")
