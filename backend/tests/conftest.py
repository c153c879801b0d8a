"""
Pytest fixtures for PortPass backend tests.

Provides the application (in-memory SQLite), a freshly cleared store per
test, staff accounts with ready-made auth headers, and slip helpers.
"""

import json
from io import BytesIO

import pytest
from werkzeug.datastructures import FileStorage

from portpass import create_app
from portpass.config import TestingConfig
from portpass.extensions import db, get_store
from portpass.services import auth_service, session_service
from portpass.store import MemoryStore


TEST_PASSWORD = "secret123"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for testing."""
    app = create_app(
        {"SLIP_UPLOAD_DIR": str(tmp_path_factory.mktemp("slips"))},
        config_object=TestingConfig,
    )

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def store(app):
    """The app's SQL store with every table emptied."""
    for table in reversed(db.metadata.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()

    yield get_store()

    db.session.rollback()


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    """Run a test against both store backends."""
    if request.param == "memory":
        return MemoryStore()
    return request.getfixturevalue("store")


@pytest.fixture
def slip_dir(tmp_path):
    path = tmp_path / "slips"
    path.mkdir()
    return str(path)


def make_staff(store, username, *, is_admin=False, designation="Harbour Officer", password=TEST_PASSWORD):
    return auth_service.create_staff(
        store,
        {
            "username": username,
            "password": password,
            "fullName": username.title(),
            "designation": designation,
            "department": "Operations",
            "isAdmin": is_admin,
        },
        rounds=4,
    )


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


def headers_for(store, staff) -> dict:
    _, token = session_service.create_session(store, staff.id)
    return auth_headers(token)


def make_slip(content=PNG_BYTES, filename="slip.png", content_type="image/png") -> FileStorage:
    return FileStorage(stream=BytesIO(content), filename=filename, content_type=content_type)


def submission(*items, payer=None) -> dict:
    return {
        "payer": payer or {"name": "Aisha", "email": "aisha@example.mv", "phone": "7771234"},
        "passes": list(items),
    }


def daily_item(name="Ahmed Ali", id_number="A123456", valid_date="2025-08-03"):
    return {"customerName": name, "passType": "daily", "idNumber": id_number, "validDate": valid_date}


def vehicle_item(name="Ibrahim", plate="P-1234", pass_type="vehicle", valid_date="2025-08-03"):
    return {"customerName": name, "passType": pass_type, "plateNumber": plate, "validDate": valid_date}


def multipart(body: dict, slip=(PNG_BYTES, "slip.png", "image/png")) -> dict:
    data = {"data": json.dumps(body)}
    if slip is not None:
        content, filename, content_type = slip
        data["slip"] = (BytesIO(content), filename, content_type)
    return data


@pytest.fixture
def admin(store):
    return make_staff(store, "chief", is_admin=True, designation="Port Master")


@pytest.fixture
def clerk(store):
    return make_staff(store, "clerk")


@pytest.fixture
def admin_headers(store, admin):
    return headers_for(store, admin)


@pytest.fixture
def clerk_headers(store, clerk):
    return headers_for(store, clerk)
