# Overview: Flask API routes for admin operations; parses input and returns JSON responses.

# backend/portpass/routes/admin.py
"""
Admin routes for staff account management.

Provides endpoints for:
- Staff management (list, create, update, deactivate)

All endpoints require an authenticated administrator. Accounts are never
deleted, only disabled.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..errors import ValidationError
from ..extensions import get_store
from ..services import auth_service
from ..decorators import require_auth, require_admin

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.get("/staff")
@require_auth
@require_admin
def list_staff():
    """
    List staff accounts.

    Query params:
    - include_inactive: bool (default false) - include disabled accounts
    """
    include_inactive = request.args.get("include_inactive", "false").lower() == "true"
    staff = get_store().list_staff(include_inactive=include_inactive)
    return jsonify([s.to_dict() for s in staff])


@admin_bp.post("/staff")
@require_auth
@require_admin
def create_staff():
    """
    Create a new staff account.

    Request body:
    - username: str (required, min 3 chars, unique)
    - password: str (required, min 6 chars)
    - fullName, designation, department: str (required)
    - isAdmin: bool (optional, default false)
    """
    data = request.get_json(silent=True)
    staff = auth_service.create_staff(
        get_store(), data, rounds=current_app.config["BCRYPT_ROUNDS"]
    )
    current_app.logger.info("Staff %s created by %s", staff.username, g.current_staff.username)
    return jsonify({
        "message": "Staff member created successfully",
        "staff": staff.summary(),
    }), 201


@admin_bp.patch("/staff/<staff_id>")
@require_auth
@require_admin
def update_staff(staff_id: str):
    """
    Update a staff account.

    Request body (all optional): fullName, designation, department, isAdmin,
    isActive, password.
    """
    data = request.get_json(silent=True)
    if staff_id == g.current_staff.id and isinstance(data, dict):
        if data.get("isActive") is False or data.get("isAdmin") is False:
            raise ValidationError("You cannot disable or demote your own account")

    staff = auth_service.update_staff(
        get_store(), staff_id, data, rounds=current_app.config["BCRYPT_ROUNDS"]
    )
    return jsonify({"message": "Staff member updated", "staff": staff.to_dict()})


@admin_bp.delete("/staff/<staff_id>")
@require_auth
@require_admin
def deactivate_staff(staff_id: str):
    """Disable a staff account (soft delete)."""
    if staff_id == g.current_staff.id:
        raise ValidationError("You cannot disable your own account")

    staff = auth_service.deactivate_staff(get_store(), staff_id)
    return jsonify({"message": "Staff member deactivated", "staff": staff.to_dict()})
