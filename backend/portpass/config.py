# backend/portpass/config.py
from __future__ import annotations
import os


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/portpass.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///portpass.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "sql" (Flask-SQLAlchemy) or "memory" (process-local dicts)
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "sql")
    AUTO_CREATE_TABLES = _env_flag("AUTO_CREATE_TABLES", "true")

    # Bank transfer slips
    SLIP_UPLOAD_DIR = os.environ.get("SLIP_UPLOAD_DIR", os.path.join("uploads", "slips"))
    MAX_SLIP_BYTES = 5 * 1024 * 1024
    ALLOWED_SLIP_TYPES = ("image/jpeg", "image/png", "application/pdf")

    SESSION_TTL_HOURS = int(os.environ.get("SESSION_TTL_HOURS", "24"))
    AUTH_COOKIE_NAME = "portpass_session"

    RECENT_PASSES_LIMIT = 5
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    SEED_DEFAULT_ADMIN = _env_flag("SEED_DEFAULT_ADMIN", "true")
    DEFAULT_ADMIN_USERNAME = os.environ.get("DEFAULT_ADMIN_USERNAME", "admin")
    DEFAULT_ADMIN_PASSWORD = os.environ.get("DEFAULT_ADMIN_PASSWORD", "admin123")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    BCRYPT_ROUNDS = 4
    SEED_DEFAULT_ADMIN = False
    LOG_LEVEL = "WARNING"
