# Overview: Request decorators that gate API routes on session state and the admin flag.

from functools import wraps
from flask import request, g, current_app

from .errors import ForbiddenError, Unauthenticated
from .extensions import get_store
from .services import session_service


def request_token() -> str | None:
    """
    Session token from the Authorization header, falling back to the login cookie.
    """
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return request.cookies.get(current_app.config["AUTH_COOKIE_NAME"])


def require_auth(f):
    """
    Require an authenticated staff session.

    Sets on flask.g:
    - g.current_staff: the StaffRecord of the logged-in staff member
    - g.session_token: the plaintext token used for this request

    Returns 401 if the token is missing, unknown, revoked or expired, or if
    the staff account has been disabled.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = request_token()
        context = session_service.validate_session(get_store(), token)

        if not context:
            raise Unauthenticated()

        g.current_staff = context.staff
        g.session_token = token
        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """
    Require the authenticated staff member to be an administrator.

    Must be stacked below @require_auth. Unauthenticated callers still get 401
    so the two cases stay distinguishable.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not hasattr(g, 'current_staff'):
            raise Unauthenticated()
        if not g.current_staff.is_admin:
            current_app.logger.info(
                "Admin route %s refused for staff %s", request.path, g.current_staff.username
            )
            raise ForbiddenError()
        return f(*args, **kwargs)
    return decorated_function
