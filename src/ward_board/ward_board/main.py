from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_utils import configure_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .clock.controller import register as register_clock
from .identity.controller import register as register_identity
from .messages.controller import register as register_messages

logger = logging.getLogger(__name__)

_SETTING_NAMES = (
    "DEFAULT_WARD",
    "IDENTITY_HEADER_ID",
    "IDENTITY_HEADER_EMAIL",
    "IDENTITY_HEADER_NAME",
    "IDENTITY_HEADER_PHOTO",
    "CONTACT_EMAIL",
    "FEED_KEEPALIVE_SECONDS",
)


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    for name in _SETTING_NAMES:
        app.config[name] = getattr(settings, name)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            clock_verifier_emails=getattr(settings, "CLOCK_VERIFIER_EMAILS", ()),
        )

    app.extensions["ward_board"] = container

    register_identity(app, container)
    register_messages(app, container)
    register_clock(app, container)

    return app
