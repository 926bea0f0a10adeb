from __future__ import annotations

import logging
from datetime import date

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import salary_period
from ..common.web import admin_required, flash_error, period_arg
from ..container import Container
from ..core.enums import ExpenseCategory, FilterPeriod
from ..core.exceptions import ApiError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    expenses = container.expense_service

    @app.route("/expenses", endpoint="expenses")
    @admin_required
    def expense_list():
        period = period_arg(request.args, FilterPeriod.ALL)
        category = request.args.get("category", "all")
        vehicle_id = request.args.get("vehicle_id", "all")
        view = request.args.get("view", "both")

        items, salaries, workers, vehicles = [], [], [], []
        try:
            if view in ("both", "cars"):
                items = expenses.list(category=category, vehicle_id=vehicle_id, period=period)
            if view in ("both", "workers"):
                salaries = expenses.salaries()
            workers = expenses.workers()
            vehicles = container.vehicle_service.list(active_only=True)
        except ApiError as e:
            flash_error(e, "Ausgaben konnten nicht geladen werden")

        editing = None
        edit_id = request.args.get("edit")
        if edit_id:
            editing = next((e for e in items if e.expense_id == edit_id), None)

        start, end = salary_period(date.today())
        return render_template(
            "expenses.html",
            expenses=items,
            groups=expenses.group_by_vehicle(items),
            summary=expenses.summary(items, salaries),
            salaries=salaries,
            salary_start=start,
            salary_end=end,
            workers=workers,
            vehicles=vehicles,
            categories=list(ExpenseCategory),
            category=category,
            vehicle_id=vehicle_id,
            period=period.value,
            view=view,
            editing=editing,
            today=date.today().isoformat(),
            active_page="expenses",
        )

    @app.route("/expenses", methods=["POST"], endpoint="expense_save")
    @admin_required
    def expense_save():
        expense_id = request.form.get("expense_id") or None
        try:
            expenses.save(request.form, expense_id)
            flash("Ausgabe erfolgreich aktualisiert" if expense_id else "Ausgabe erfolgreich erstellt", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e, "Ausgabe konnte nicht gespeichert werden")
        except Exception:
            logger.exception("Saving expense failed")
            flash("Ausgabe konnte nicht gespeichert werden", "danger")
        return redirect(url_for("expenses"))

    @app.route("/expenses/<expense_id>/delete", methods=["POST"], endpoint="expense_delete")
    @admin_required
    def expense_delete(expense_id: str):
        try:
            expenses.delete(expense_id)
            flash("Ausgabe erfolgreich gelöscht", "success")
        except ApiError as e:
            flash_error(e, "Ausgabe konnte nicht gelöscht werden")
        return redirect(url_for("expenses"))

    @app.route("/workers/<user_id>/hourly-rate", methods=["POST"], endpoint="update_hourly_rate")
    @admin_required
    def update_hourly_rate(user_id: str):
        try:
            expenses.update_hourly_rate(user_id, request.form.get("hourly_rate"))
            flash("Stundenlohn erfolgreich aktualisiert", "success")
        except (ValidationError, ApiError) as e:
            flash_error(e, "Stundenlohn konnte nicht aktualisiert werden")
        return redirect(url_for("expenses", view="workers"))
