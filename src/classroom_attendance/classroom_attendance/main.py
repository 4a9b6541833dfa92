from __future__ import annotations

import importlib
import logging
from pathlib import Path
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .common.http import json_error
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .logging_config import configure_logging
from .realtime.controller import register as register_realtime
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def _load_settings(settings_module: Optional[str]) -> tuple[str, ModuleType]:
    name = settings_module or get_settings_module()
    return name, importlib.import_module(name)


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_name, settings = _load_settings(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), log_file=getattr(settings, "LOG_FILE", None))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    CORS(
        app,
        origins=[getattr(settings, "FRONTEND_URL", "http://localhost:5173")],
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    )

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_name,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_data(db_config)

        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            jwt_ttl_hours=int(getattr(settings, "JWT_TTL_HOURS", 24)),
            strict_session_ownership=bool(getattr(settings, "STRICT_SESSION_OWNERSHIP", False)),
        )

    app.extensions["classroom_attendance"] = container

    register_users(app, container)
    register_classes(app, container)
    register_attendance(app, container)
    register_realtime(app, container)

    @app.errorhandler(404)
    def not_found(_e):
        return json_error("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return json_error("Method not allowed", 405)

    return app
