from __future__ import annotations

import importlib
from pathlib import Path

import structlog
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_config import configure_logging
from .container import Container, build_container
from .core.constants import PERSONNEL_APPOINTMENT_FORM_KEY
from .database.bootstrap import apply_schema, list_tables
from .promotions.controller import register as register_promotions

logger = structlog.get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        log_json=bool(getattr(settings, "LOG_JSON", False)),
    )
    logger.info(
        "app_starting",
        settings=settings_module,
        db=f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema_ready", tables=len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            form_key=getattr(settings, "APPOINTMENT_FORM_KEY", PERSONNEL_APPOINTMENT_FORM_KEY),
        )

    register_promotions(app, container)

    return app
