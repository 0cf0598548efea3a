from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.responses import json_error
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _bootstrap_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_demo_users(db_config)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(404)
    def not_found(_e):
        return json_error("not found", "Resource not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return json_error("method not allowed", "Method not allowed", 405)


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    """Build the Flask app.

    When ``container`` is given (tests, embedding) no database bootstrap is
    attempted; otherwise the MySQL container is built and opened from settings.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    CORS(app, supports_credentials=True, origins=getattr(settings, "CORS_ORIGINS", "*"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("Starting with settings=%s", settings_module)
        _bootstrap_database(settings, db_config)
        container = build_container(db_config=db_config)
        container.conn.open()

    app.extensions["class_attendance"] = container

    register_users(app, container)
    register_attendance(app, container)
    _register_error_handlers(app)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    return app
