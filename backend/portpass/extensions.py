# Overview: Flask extension instances for database and migrations, plus the pass store accessor.

from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()

STORE_EXTENSION_KEY = "portpass_store"


def get_store():
    """Return the PassStore instance built by create_app()."""
    return current_app.extensions[STORE_EXTENSION_KEY]
