# estateledger_backend/__init__.py
from __future__ import annotations

import logging
import os
from datetime import datetime
from importlib import import_module
from typing import Any, Optional

from flask import Flask, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from estateledger_backend.cli import register_cli
from estateledger_backend.errors import register_error_handlers, register_jwt_handlers
from estateledger_backend.extensions import cors, db, jwt, migrate

BLUEPRINTS = (
    "estateledger_backend.routes.auth",
    "estateledger_backend.routes.rent_bills",
    "estateledger_backend.routes.utility_bills",
    "estateledger_backend.routes.payments",
    "estateledger_backend.routes.tenants",
    "estateledger_backend.routes.maintenance",
    "estateledger_backend.routes.security",
    "estateledger_backend.routes.notifications",
    "estateledger_backend.routes.financials",
    "estateledger_backend.routes.public",
)


# --- Config ------------------------------------------------------------------
def _get_allowed_origins() -> list[str]:
    """Allowed CORS origins from env, plus the local dev frontends."""
    default = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
    extra = os.getenv("CORS_ALLOWED_ORIGINS", "")
    extra_list = [o.strip() for o in extra.split(",") if o.strip()]
    return sorted(set(default + extra_list))


def _load_config(app: Flask, config_object: Optional[str | Any]) -> None:
    if config_object is None:
        config_object = os.getenv("CONFIG_CLASS", "estateledger_backend.config.Config")
    if isinstance(config_object, str):
        module, _, cls = config_object.rpartition(".")
        config_object = getattr(import_module(module), cls)
    app.config.from_object(config_object)
    app.config.setdefault("API_PREFIX", "/api")

    if not app.config.get("TESTING"):
        missing = [k for k in ("SECRET_KEY", "SQLALCHEMY_DATABASE_URI") if not app.config.get(k)]
        if missing:
            raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")
    if not app.config.get("JWT_SECRET_KEY"):
        app.config["JWT_SECRET_KEY"] = app.config["SECRET_KEY"]


def _configure_logging(app: Flask) -> None:
    """JSON-ish log lines to stdout."""
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers in reloaders
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='{"ts":"%(asctime)s","level":"%(levelname)s","msg":"%(message)s","name":"%(name)s"}',
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)


def _configure_cors(app: Flask) -> None:
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": _get_allowed_origins()}},
        supports_credentials=True,
        methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-CSRF-Token"],
        max_age=86400,
    )


def _configure_proxy(app: Flask) -> None:
    """Respect X-Forwarded-* when running behind a reverse proxy."""
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore


def _init_extensions(app: Flask) -> None:
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    register_jwt_handlers(jwt)


def _register_blueprints(app: Flask) -> None:
    """Register all API blueprints under /api."""
    for module_path in BLUEPRINTS:
        bp = import_module(module_path).bp
        app.register_blueprint(bp, url_prefix=app.config["API_PREFIX"])
        app.logger.debug("Registered blueprint %s at %s", module_path, app.config["API_PREFIX"])


# --- Application Factory ------------------------------------------------------
def create_app(config_object: Optional[str | Any] = None) -> Flask:
    """
    Standard Flask application factory.

    `config_object` may be:
      - a config class
      - dotted path to a config class (e.g., "estateledger_backend.config.DevelopmentConfig")
      - None (then CONFIG_CLASS env or estateledger_backend.config.Config)
    """
    app = Flask(__name__, instance_relative_config=True)
    _load_config(app, config_object)

    _configure_logging(app)
    _configure_proxy(app)
    _configure_cors(app)

    _init_extensions(app)
    register_error_handlers(app)
    _register_blueprints(app)
    register_cli(app)

    @app.get(app.config["API_PREFIX"] + "/health")
    def health():
        return jsonify(
            {
                "success": True,
                "status": "ok",
                "time": datetime.utcnow().isoformat() + "Z",
                "service": "estateledger-backend",
            }
        ), 200

    return app
