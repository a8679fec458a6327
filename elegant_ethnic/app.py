"""Elegant Ethnic storefront Flask application."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .common.errors import StoreError
from .common.services.logging import configure_events
from .config import StoreConfig
from .routes import admin_bp, api_bp
from .services import CheckoutService, IStorage, MemStorage, SqlStorage, seed_catalog

logger = logging.getLogger(__name__)


def build_storage(config: StoreConfig) -> IStorage:
    if config.backend == "sql":
        return SqlStorage(config.database_url)
    return MemStorage()


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(StoreError)
    def handle_store_error(exc: StoreError):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description or exc.name}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return jsonify({"error": "Internal server error"}), 500


def create_app(config: Optional[StoreConfig] = None, storage: Optional[IStorage] = None) -> Flask:
    """Build the app. ``storage`` is injected as-is; otherwise one is built (and seeded) from ``config``."""
    config = config or StoreConfig.load()
    logging.basicConfig(level=config.log_level)
    configure_events(config.log_level)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key
    app.config["STORE_CONFIG"] = config

    if storage is None:
        storage = build_storage(config)
        if config.seed_catalog:
            seed_catalog(storage)

    app.extensions["storefront_components"] = {
        "storage": storage,
        "checkout": CheckoutService(storage),
    }

    app.register_blueprint(api_bp)
    app.register_blueprint(admin_bp)
    register_error_handlers(app)
    logger.info("Storefront ready (backend=%s)", type(storage).__name__)
    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=False)


if __name__ == "__main__":
    main()
