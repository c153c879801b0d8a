# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/portpass/routes/auth.py
"""
Authentication API routes

Login returns a bearer token and also sets it as an HTTP-only cookie, so
both API clients and the browser UI can authenticate. Staff accounts are
created by administrators only (see routes/admin.py).
"""

from datetime import timedelta

from flask import Blueprint, request, jsonify, current_app, g

from ..errors import ValidationError
from ..extensions import get_store
from ..services import auth_service
from ..services import session_service
from ..decorators import require_auth


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate staff member and create a session.

    Request body: {"username": "...", "password": "..."}

    Unknown username, disabled account and wrong password all return the same
    401 "Invalid credentials".
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")
    username = data.get("username")
    password = data.get("password")

    if not isinstance(username, str) or not username.strip():
        raise ValidationError("Username is required")
    if not isinstance(password, str) or not password:
        raise ValidationError("Password is required")

    store = get_store()
    staff = auth_service.authenticate(store, username.strip(), password)

    ttl = timedelta(hours=current_app.config["SESSION_TTL_HOURS"])
    session, token = session_service.create_session(store, staff.id, ttl=ttl)

    response = jsonify({
        "message": "Login successful",
        "staff": staff.summary(),
        "token": token,
        "session": session.to_dict(),
    })
    response.set_cookie(
        current_app.config["AUTH_COOKIE_NAME"],
        token,
        max_age=int(ttl.total_seconds()),
        httponly=True,
        samesite="Lax",
        secure=not (current_app.debug or current_app.testing),
    )
    return response, 200


@auth_bp.post("/logout")
@require_auth
def logout_route():
    """Revoke the current session token."""
    session_service.revoke_session(get_store(), g.session_token, reason="Staff logout")

    response = jsonify({"message": "Logout successful"})
    response.delete_cookie(current_app.config["AUTH_COOKIE_NAME"])
    return response, 200


@auth_bp.get("/me")
@require_auth
def me_route():
    """Current staff member's summary."""
    return jsonify(g.current_staff.summary()), 200
