"""Lotto Hub Flask application package."""

from __future__ import annotations

import logging
from typing import Any

from flask import Flask

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def create_app(config_object: Any | None = None, store: Any | None = None) -> Flask:
    """Application factory.

    Args:
        config_object: optional config class/instance overriding APP_ENV selection.
        store: optional StateStore overriding the configured backend.

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from lotto_hub.cli import register_commands, retention_from_config
    from lotto_hub.config import get_config
    from lotto_hub.db import init_state
    from lotto_hub.error_handlers import register_error_handlers
    from lotto_hub.errors import StorageError
    from lotto_hub.logging_config import configure_logging
    from lotto_hub.routes.catalog import catalog_bp
    from lotto_hub.routes.health import health_bp
    from lotto_hub.routes.results import results_bp
    from lotto_hub.routes.sales import sales_bp
    from lotto_hub.routes.verification import verification_bp
    from lotto_hub.services.catalog_service import CatalogService

    app = Flask(__name__)
    app.config.from_object(config_object or get_config())

    configure_logging(app)
    state = init_state(app, store)
    register_error_handlers(app)
    register_commands(app)

    try:
        if app.config.get("SEED_DEFAULT_LOTTERIES"):
            CatalogService().seed_defaults(state)
        if app.config.get("PURGE_ON_START"):
            retention_from_config(app.config).purge(state)
    except StorageError as exc:
        # Keep serving from the loaded state; the next successful write persists it.
        logger.error("Startup maintenance skipped: %s", exc.details or exc.message)

    app.register_blueprint(health_bp)
    app.register_blueprint(catalog_bp, url_prefix="/api")
    app.register_blueprint(sales_bp, url_prefix="/api")
    app.register_blueprint(results_bp, url_prefix="/api")
    app.register_blueprint(verification_bp, url_prefix="/api")

    return app
