# Overview: Error taxonomy shared by services and routes; each error knows its HTTP status.

"""
Application errors.

Services raise these; the handlers registered in create_app() turn them into
JSON responses of the form {"message": "..."}. No structured error codes are
exposed to clients.
"""


class PortPassError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortPassError, ValueError):
    """400-level input problem."""

    status_code = 400
    default_message = "Invalid request"


class UploadError(PortPassError):
    """Missing, oversized or wrong-type bank transfer slip."""

    status_code = 400
    default_message = "Bank transfer slip is required"


class InvalidCredentials(PortPassError):
    """
    Login failure.

    Unknown username, inactive account and wrong password all raise this with
    the same message so the response does not reveal which case occurred.
    """

    status_code = 401
    default_message = "Invalid credentials"


class Unauthenticated(PortPassError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(PortPassError):
    status_code = 403
    default_message = "Administrator access required"


class NotFound(PortPassError):
    status_code = 404
    default_message = "Not found"


class StorageFailure(PortPassError):
    """Unexpected fault inside the persistence layer."""

    status_code = 500
    default_message = "Storage failure"
