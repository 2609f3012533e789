"""
core/errors.py -- Domain exceptions for the People API.

Every failure the service reports to a client is one of these. Stores and auth
helpers raise them; api/main.py maps them onto the JSON error envelope with a
single exception handler, so route handlers never build error responses by hand.

Each subclass carries its wire code and default HTTP status as class attributes.
"""

from __future__ import annotations


class PeopleAPIError(Exception):
    """Base exception for all People API errors."""

    code: str = "error"
    status_code: int = 400
    default_message: str = "Request failed."

    def __init__(self, message: str | None = None, *, detail: str | None = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class DuplicateUser(PeopleAPIError):
    """Raised by signup when the username is already taken."""

    code = "duplicate_user"
    default_message = "A user with that username already exists."


class UserNotFound(PeopleAPIError):
    """Raised by login when no user matches the username."""

    code = "user_not_found"
    default_message = "User doesn't exist."


class PasswordMismatch(PeopleAPIError):
    code = "password_mismatch"
    default_message = "Password doesn't match."


class InvalidSignature(PeopleAPIError):
    """Raised when a session token is malformed or its signature does not verify."""

    code = "invalid_signature"
    status_code = 401
    default_message = "Invalid session token."


class Unauthorized(PeopleAPIError):
    code = "unauthorized"
    status_code = 401
    default_message = "You are not authorized"


class StoreFailure(PeopleAPIError):
    """Catch-all for persistence errors surfaced by the stores."""

    code = "store_failure"
    default_message = "The data store rejected the request."


class NotFound(PeopleAPIError):
    code = "not_found"
    status_code = 404
    default_message = "Not found."
