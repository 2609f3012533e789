"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The session token is read from the "token" cookie only -- the browser sets it
on login and clears it on logout.

get_current_user() is the hard gate: raises Unauthorized without a valid cookie.
get_owner() is what the /people routes use: None when the service runs without
auth (every record is global), otherwise the authenticated username.
require_auth_enabled() hides the auth routes when auth is switched off.

Layer rule: no imports from api/ or people/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.tokens import decode_access_token
from core.config import get_settings
from core.errors import InvalidSignature, NotFound, Unauthorized


def get_current_user(request: Request) -> str:
    """Require a valid session cookie. Returns the username it carries.

    The decoded username is also attached to request.state.username so
    middleware and handlers further down can read it.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(username: str = Depends(get_current_user)): ...
    """
    token = request.cookies.get(get_settings().cookie_name)
    if not token:
        raise Unauthorized()
    try:
        payload = decode_access_token(token)
    except InvalidSignature as exc:
        raise Unauthorized(detail=exc.message) from exc
    request.state.username = payload["sub"]
    return payload["sub"]


def get_owner(request: Request) -> str | None:
    """Return the username that scopes /people queries, or None without auth."""
    if not request.app.state.auth_enabled:
        return None
    return get_current_user(request)


def require_auth_enabled(request: Request) -> None:
    """Router-level guard: the auth routes do not exist when auth is disabled."""
    if not request.app.state.auth_enabled:
        raise NotFound()
