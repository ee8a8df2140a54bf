from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.web import register_error_handlers
from .container import build_container
from .core.constants import DEFAULT_PROBATION_MONTHS, DEFAULT_REST_WEEKDAY
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .employees.controller import register as register_employees
from .holidays.controller import register as register_holidays
from .leaves.controller import register as register_leaves
from .transfers.controller import register as register_transfers

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module, db_config.get("user"), db_config.get("host"),
        db_config.get("port", 3306), db_config.get("database"),
    )

    root = Path(__file__).resolve().parents[3]
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=root / "database" / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=root / "database" / "seed.sql")
        logger.info("Seed data loaded")

    container = build_container(
        db_config=db_config,
        rest_weekday=int(getattr(settings, "WEEKLY_REST_DAY", DEFAULT_REST_WEEKDAY)),
        probation_months=int(getattr(settings, "PROBATION_MONTHS", DEFAULT_PROBATION_MONTHS)),
    )
    app.extensions["plantation_hr"] = container

    register_error_handlers(app)
    register_leaves(app, container)
    register_transfers(app, container)
    register_holidays(app, container)
    register_employees(app, container)

    return app
