"""
api/routes/auth.py -- Signup, login and logout endpoints.

Routes:
  POST /signup      -- create an account; returns the user without its hash
  POST /login       -- verify credentials; sets the "token" cookie
  GET  /logout      -- clears the cookie
  GET  /cookietest  -- echoes every cookie the request carried

All four answer 404 when AUTH_ENABLED=false (router-level require_auth_enabled).

Failures (DuplicateUser, UserNotFound, PasswordMismatch) are raised, not
returned; api/main.py renders them as 400s. A failed login never sets a cookie
because the response carrying it is only built after authentication succeeds.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import Credentials, MessageResponse, UserResponse
from auth.dependencies import require_auth_enabled
from auth.store import UserStore
from auth.tokens import authenticate_user, clear_auth_cookie, create_access_token, set_auth_cookie, signup

router = APIRouter(dependencies=[Depends(require_auth_enabled)])


@router.post("/signup", response_model=UserResponse)
def signup_user(request: Request, body: Credentials) -> UserResponse:
    """Create an account. The stored hash is never echoed back."""
    user_store: UserStore = request.app.state.user_store
    user = signup(user_store, body.username, body.password)
    return UserResponse.from_user(user)


@router.post("/login", response_model=UserResponse)
def login(request: Request, body: Credentials) -> JSONResponse:
    """Authenticate with username and password; set the session cookie.

    Uses authenticate_user(), which includes timing equalization. Do NOT
    inline get_by_username() + verify_password().
    """
    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.username, body.password)
    resp = JSONResponse(content=UserResponse.from_user(user).model_dump())
    set_auth_cookie(resp, create_access_token(user.username))
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/logout", response_model=MessageResponse)
def logout() -> JSONResponse:
    """Clear the session cookie. Needs no prior auth."""
    resp = JSONResponse(content={"message": "Bye bye"})
    clear_auth_cookie(resp)
    return resp


@router.get("/cookietest")
def cookie_test(request: Request) -> dict[str, str]:
    return dict(request.cookies)
