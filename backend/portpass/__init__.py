# backend/portpass/__init__.py
import logging

from flask import Flask, request, jsonify
from sqlalchemy import inspect
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import PortPassError
from .extensions import db, migrate, STORE_EXTENSION_KEY
from .models import Staff  # registers every table on db.metadata for Alembic
from .store import build_store



def create_app(config_overrides: dict | None = None, config_object=Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    store = build_store(app.config["STORE_BACKEND"])
    app.extensions[STORE_EXTENSION_KEY] = store

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.admin import admin_bp
    from .routes.passes import passes_bp
    from .routes.verify import verify_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(passes_bp)
    app.register_blueprint(verify_bp)

    register_error_handlers(app)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:5000",
            "http://127.0.0.1:5000",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PATCH,DELETE,OPTIONS"
        return response

    with app.app_context():
        if store.backend_name == "sql" and app.config["AUTO_CREATE_TABLES"]:
            db.create_all()
        seed_default_admin(app, store)

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app


def seed_default_admin(app: Flask, store) -> None:
    """
    Create the bootstrap administrator when SEED_DEFAULT_ADMIN is set.

    On the sql backend nothing happens until the staff table exists, so the
    factory still loads against an unmigrated database (e.g. for `flask db upgrade`).
    """
    if not app.config["SEED_DEFAULT_ADMIN"]:
        return
    if store.backend_name == "sql" and not inspect(db.engine).has_table(Staff.__tablename__):
        app.logger.warning("Staff table missing; default admin not seeded")
        return

    from .services.auth_service import ensure_default_admin
    ensure_default_admin(
        store,
        app.config["DEFAULT_ADMIN_USERNAME"],
        app.config["DEFAULT_ADMIN_PASSWORD"],
        rounds=app.config["BCRYPT_ROUNDS"],
    )


def register_error_handlers(app: Flask) -> None:
    """Every error leaves the app as {"message": ...}."""

    @app.errorhandler(PortPassError)
    def handle_portpass_error(exc: PortPassError):
        if exc.status_code >= 500:
            app.logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.path, exc.message)
        return jsonify({"message": exc.message}), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"message": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"message": "Internal server error"}), 500
