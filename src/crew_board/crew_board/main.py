from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.logging_setup import configure_logging
from .common.web import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_default_holidays, list_tables
from .employees.controller import register as register_employees
from .payroll.controller import register as register_payroll
from .requests.controller import register as register_requests
from .schedules.controller import register as register_schedules

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _prepare_database(settings: ModuleType, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
        ensure_default_holidays(db_config)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
        logger.info("demo seed ready")


def create_app(settings: Optional[ModuleType] = None, container: Optional[Container] = None) -> Flask:
    """App factory; tests pass their own settings module and an in-memory container."""

    load_dotenv(override=False)
    app = Flask(__name__)

    if settings is None:
        settings = importlib.import_module(get_settings_module())

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    remember_days = int(getattr(settings, "REMEMBER_COOKIE_DAYS", 30))
    app.permanent_session_lifetime = timedelta(days=remember_days)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings.__name__,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _prepare_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            manager_password=getattr(settings, "MANAGER_PASSWORD"),
            legacy_clock_url=getattr(settings, "LEGACY_CLOCK_URL", ""),
            sheet_api_url=getattr(settings, "SHEET_API_URL", ""),
            http_timeout=float(getattr(settings, "HTTP_TIMEOUT_SECONDS", 15)),
            remember_cookie_days=remember_days,
        )

    register_error_handlers(app)
    register_employees(app, container)
    register_schedules(app, container)
    register_attendance(app, container)
    register_requests(app, container)
    register_payroll(app, container)

    return app
