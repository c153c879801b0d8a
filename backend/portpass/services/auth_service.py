# Overview: Service-layer operations for staff accounts and password login.

"""
Staff Authentication

Passwords are hashed with bcrypt. Staff accounts are created and managed by
administrators only; there is no self-registration.

authenticate() reports every failure (unknown username, disabled account,
wrong password) as the same InvalidCredentials error so callers cannot learn
which usernames exist.
"""

from __future__ import annotations

import logging

import bcrypt

from ..errors import InvalidCredentials, NotFound, ValidationError
from ..records import StaffRecord
from ..store import PassStore
from ..time_utils import utcnow


logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

PROFILE_FIELDS = {
    "fullName": ("full_name", "Full name"),
    "designation": ("designation", "Designation"),
    "department": ("department", "Department"),
}


def validate_password(password) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return password


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash password using bcrypt. Stored as a utf-8 string."""
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Malformed hashes verify as False rather than raising.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def authenticate(store: PassStore, username: str, password: str) -> StaffRecord:
    """Return the staff member for valid credentials or raise InvalidCredentials."""
    staff = store.get_staff_by_username(username)
    if staff is None or not staff.is_active:
        logger.info("Login rejected for username %r", username)
        raise InvalidCredentials()

    if not verify_password(password, staff.password_hash):
        logger.info("Login rejected for username %r", username)
        raise InvalidCredentials()

    return staff


def _required_text(data: dict, key: str, label: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required")
    return value.strip()


def create_staff(store: PassStore, data: dict, *, rounds: int = 12) -> StaffRecord:
    """
    Create a staff account from an admin request body.

    Body keys: username, password, fullName, designation, department, isAdmin.
    """
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")

    username = data.get("username")
    if not isinstance(username, str) or len(username.strip()) < MIN_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters")
    username = username.strip()

    password = validate_password(data.get("password"))
    full_name, designation, department = (
        _required_text(data, key, label) for key, (_, label) in PROFILE_FIELDS.items()
    )

    is_admin = data.get("isAdmin", False)
    if not isinstance(is_admin, bool):
        raise ValidationError("isAdmin must be a boolean")

    if store.get_staff_by_username(username) is not None:
        raise ValidationError("Username already exists")

    staff = store.add_staff(
        username=username,
        password_hash=hash_password(password, rounds),
        full_name=full_name,
        designation=designation,
        department=department,
        is_admin=is_admin,
        is_active=True,
    )
    logger.info("Created staff account %s (admin=%s)", staff.username, staff.is_admin)
    return staff


def update_staff(store: PassStore, staff_id: str, data: dict, *, rounds: int = 12) -> StaffRecord:
    """
    Apply an admin edit: fullName, designation, department, isAdmin, isActive, password.

    Disabling an account revokes its open sessions.
    """
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")
    if store.get_staff(staff_id) is None:
        raise NotFound("Staff member not found")

    changes = {}
    for key, (field, label) in PROFILE_FIELDS.items():
        if key in data:
            changes[field] = _required_text(data, key, label)

    for key, field in (("isAdmin", "is_admin"), ("isActive", "is_active")):
        if key in data:
            if not isinstance(data[key], bool):
                raise ValidationError(f"{key} must be a boolean")
            changes[field] = data[key]

    if "password" in data:
        changes["password_hash"] = hash_password(validate_password(data["password"]), rounds)

    if not changes:
        raise ValidationError("No changes provided")

    with store.unit_of_work():
        staff = store.update_staff(staff_id, **changes)
        if changes.get("is_active") is False or "password_hash" in changes:
            store.revoke_staff_sessions(staff_id, reason="Account updated", now=utcnow())
    return staff


def deactivate_staff(store: PassStore, staff_id: str) -> StaffRecord:
    """Soft-disable an account. Staff rows are never deleted."""
    if store.get_staff(staff_id) is None:
        raise NotFound("Staff member not found")
    with store.unit_of_work():
        staff = store.update_staff(staff_id, is_active=False)
        store.revoke_staff_sessions(staff_id, reason="Account deactivated", now=utcnow())
    logger.info("Deactivated staff account %s", staff.username)
    return staff


def ensure_default_admin(store: PassStore, username: str, password: str, *, rounds: int = 12) -> StaffRecord | None:
    """Create the bootstrap administrator if the username is free. Returns it when created."""
    if store.get_staff_by_username(username) is not None:
        return None
    staff = store.add_staff(
        username=username,
        password_hash=hash_password(password, rounds),
        full_name="Administrator",
        designation="System Administrator",
        department="IT",
        is_admin=True,
        is_active=True,
    )
    logger.warning("Seeded default administrator account %r; change its password", username)
    return staff
