# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from auth_backend.infrastructure.container import Container
from auth_backend.infrastructure.db import init_db
from auth_backend.infrastructure.observability import install_request_metrics
from auth_backend.shared.config import AppConfig, load_config
from auth_backend.shared.logging import logger, setup_logging
from auth_backend.shared.middleware.error_handler import configure_error_handling
from auth_backend.shared.middleware.request_logger import configure_request_logging


def create_app(config: AppConfig | None = None, *, container: Container | None = None) -> Flask:
    config = config or load_config()
    container = container or Container(config)

    setup_logging(
        config.log_level,
        debug_mode=config.debug_logging,
        log_file=config.log_file,
    )
    init_db()

    app = Flask(__name__)
    app.extensions["auth_container"] = container
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)
    if config.observability.metrics_enabled:
        install_request_metrics(app)

    CORS(app, resources={r"/api/*": {"origins": config.security.allowed_origins}})

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info(f"Flask app initialized env={config.app_env}")
    return app
