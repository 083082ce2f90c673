from __future__ import annotations

import importlib
import logging
import logging.config
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_TIMEZONE
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from .database.bootstrap import DEMO_EMPLOYEES, apply_schema, ensure_demo_employees, list_tables
from .employees.controller import register as register_employees
from .ledger.controller import register as register_ledger
from .payroll.controller import register as register_payroll
from .stats.controller import register as register_stats

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type, int] = {
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    NotFoundError: 404,
    InvalidTransitionError: 409,
    ConflictError: 409,
}

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"}},
            "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "default"}},
            "root": {"handlers": ["console"], "level": level.upper()},
        }
    )


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for kind, code in ERROR_STATUS.items() if isinstance(e, kind)), 400)
        return jsonify({"success": False, "error": type(e).__name__, "message": str(e)}), status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("unhandled error")
        return jsonify({"success": False, "error": "InternalError", "message": "Internal server error"}), 500


def seed_directory(container: Container) -> None:
    """Load the demo PINs into a fresh (in-memory) directory."""
    for pin, name, wage, role in DEMO_EMPLOYEES:
        if container.employees_repo.get_by_id(pin) is None:
            container.directory.create(name=name, hourly_wage=wage, role=role, pin=pin)


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(str(getattr(settings, "LOG_LEVEL", "INFO")))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["ADMIN_AUTH_REQUIRED"] = bool(getattr(settings, "ADMIN_AUTH_REQUIRED", False))
    app.json.sort_keys = False

    cors_origins = getattr(settings, "CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}}, supports_credentials=True)

    storage_backend = str(getattr(settings, "STORAGE_BACKEND", "memory"))
    db_config = getattr(settings, "DB_CONFIG", None)
    timezone = str(getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE))

    if container is None:
        if storage_backend == "mysql":
            if getattr(settings, "AUTO_INIT_DB", False):
                apply_schema(db_config, schema_path=SCHEMA_PATH)
                logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
            if getattr(settings, "AUTO_SEED_DB", False):
                ensure_demo_employees(db_config)
                logger.info("demo employees ready")
        container = build_container(storage_backend=storage_backend, db_config=db_config, timezone=timezone)
        if storage_backend == "memory" and getattr(settings, "AUTO_SEED_DB", False):
            seed_directory(container)

    logger.info("settings=%s storage=%s tz=%s", settings_module, storage_backend, timezone)

    app.extensions["timeclock"] = container
    register_error_handlers(app)
    register_employees(app, container)
    register_ledger(app, container)
    register_payroll(app, container)
    register_stats(app, container)

    return app
