from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .appointments.controller import register as register_appointments
from .auth.controller import register as register_auth
from .common.datetime_utils import format_date_de
from .common.log import setup_logger
from .common.web import active_user, bearer_token, current_worker, is_admin
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .dashboard.controller import register as register_dashboard
from .expenses.controller import register as register_expenses
from .invoices.controller import register as register_invoices
from .invoices.pdf import CompanyInfo, chf
from .settings import get_settings_module
from .time_logs.controller import register as register_time_logs
from .vehicles.controller import register as register_vehicles
from .work_sessions.controller import register as register_work_sessions

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["QR_TOKEN"] = getattr(settings, "QR_TOKEN", "GARAGE_CHECKIN")
    app.config["API_URL"] = getattr(settings, "API_URL", "http://localhost:3001")
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    setup_logger(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("settings=%s api=%s", settings_module, app.config["API_URL"])

    if container is None:
        container = build_container(
            api_url=app.config["API_URL"],
            token_provider=bearer_token,
            timeout=float(getattr(settings, "API_TIMEOUT", 15)),
            hourly_rate=float(getattr(settings, "HOURLY_RATE", 120)),
            default_tax_rate=float(getattr(settings, "DEFAULT_TAX_RATE", 7.7)),
            company=CompanyInfo(
                name=getattr(settings, "COMPANY_NAME", "Ocean Garage"),
                tagline=getattr(settings, "COMPANY_TAGLINE", "Fahrzeugreparatur & Service"),
                country=getattr(settings, "COMPANY_COUNTRY", "Schweiz"),
            ),
        )

    app.jinja_env.filters["chf"] = chf
    app.jinja_env.filters["date_de"] = format_date_de

    @app.context_processor
    def inject_identity():
        return {
            "current_user": active_user(),
            "current_worker": current_worker(),
            "is_admin": is_admin(),
        }

    register_auth(app, container)
    register_work_sessions(app, container)
    register_time_logs(app, container)
    register_vehicles(app, container)
    register_invoices(app, container)
    register_expenses(app, container)
    register_appointments(app, container)
    register_dashboard(app, container)

    return app
