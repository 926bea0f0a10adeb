"""Session accessors and route guards shared by all controllers."""

from __future__ import annotations

from datetime import MAXYEAR, MINYEAR
from functools import wraps
from typing import Optional

from flask import flash, redirect, request, session, url_for

from ..core.enums import FilterPeriod, Role
from ..core.exceptions import (
    DEFAULT_ERROR_MESSAGE,
    ApiConnectionError,
    DomainError,
    get_error_message,
    is_unauthorized,
)

SESSION_TOKEN = "token"
SESSION_USER = "user"
SESSION_WORKER = "current_worker"
SESSION_WORKER_TOKEN = "worker_token"


def current_firm_user() -> Optional[dict]:
    return session.get(SESSION_USER)


def current_worker() -> Optional[dict]:
    return session.get(SESSION_WORKER)


def active_user() -> Optional[dict]:
    """The selected worker, else the firm account."""
    return current_worker() or current_firm_user()


def is_admin() -> bool:
    user = active_user()
    return bool(user) and user.get("role") == Role.ADMIN.value


def bearer_token() -> Optional[str]:
    # Worker token (PIN login) wins over the firm token.
    return session.get(SESSION_WORKER_TOKEN) or session.get(SESSION_TOKEN)


def clear_identity() -> None:
    for key in (SESSION_TOKEN, SESSION_USER, SESSION_WORKER, SESSION_WORKER_TOKEN):
        session.pop(key, None)


def firm_login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_firm_user():
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_firm_user():
            flash("Bitte melden Sie sich an.", "warning")
            return redirect(url_for("login"))
        if not current_worker():
            return redirect(url_for("worker_selection"))
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_firm_user():
            return redirect(url_for("login"))
        if not current_worker():
            return redirect(url_for("worker_selection"))
        if not is_admin():
            return redirect(url_for("check_in"))
        return view(*args, **kwargs)

    return wrapper


def flash_error(error: Exception, default: str = DEFAULT_ERROR_MESSAGE) -> None:
    """Flash a domain or API error.

    An expired session, and an unreachable backend while loading a page, are
    re-raised for the app handlers. Errors from auth endpoints always stay
    with the form that caused them.
    """
    if not getattr(error, "is_auth_endpoint", False):
        if is_unauthorized(error):
            raise error
        if isinstance(error, ApiConnectionError) and request.method == "GET":
            raise error
    category = "warning" if isinstance(error, DomainError) else "danger"
    flash(get_error_message(error, default), category)


def month_args(request_args, today) -> tuple[int, int]:
    """``?year=&month=`` query args, falling back to today's month."""
    try:
        year = int(request_args.get("year", today.year))
        month = int(request_args.get("month", today.month))
    except (TypeError, ValueError):
        return today.year, today.month
    if not 1 <= month <= 12 or not MINYEAR < year < MAXYEAR:
        return today.year, today.month
    return year, month


def period_arg(request_args, default: FilterPeriod = FilterPeriod.ALL) -> FilterPeriod:
    try:
        return FilterPeriod(request_args.get("period", default.value))
    except ValueError:
        return default
