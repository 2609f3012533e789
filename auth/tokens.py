"""
auth/tokens.py -- Password hashing, session tokens, and the session cookie.

Security design decisions:
  Passwords: bcrypt with a fixed cost factor of 10. The _DUMMY_HASH constant
       enables timing equalization in authenticate_user() so response time
       does not reveal whether a username exists.

  Tokens: python-jose with HS256. A token carries only the username ("sub")
       and NO expiry claim -- its validity is purely a signature check against
       SECRET_KEY. decode_access_token() raises InvalidSignature on any failure;
       the auth gate turns that into Unauthorized.

  Cookie: the token travels in an httpOnly cookie. Its max_age is a hint to
       the browser, not a cryptographic guarantee.

  SECRET_KEY: sourced from core.config.get_settings(), which validates it at
       startup (dev mode auto-generates one, production refuses to start
       without one, short keys are rejected).

Layer rule: no imports from api/ or people/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from auth.models import User
from core.config import get_settings
from core.errors import DuplicateUser, InvalidSignature, PasswordMismatch, UserNotFound

if TYPE_CHECKING:
    from auth.store import UserStore

logger = logging.getLogger("peopleapi.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"
_BCRYPT_ROUNDS = 10

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt accepts at most 72 bytes of input; api/models.Credentials rejects
    longer passwords before they get here.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A malformed stored hash is a mismatch, not an error.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


# Timing equalization dummy hash. Computed once at module load so the first
# login attempt is not measurably slower than subsequent ones.
_DUMMY_HASH: str = hash_password("peopleapi_timing_dummy")


# ---------------------------------------------------------------------------
# Credential flows
# ---------------------------------------------------------------------------


def signup(store: UserStore, username: str, password: str) -> User:
    """Hash the password and persist a new user.

    Raises DuplicateUser (from the store) if the username is taken.
    Returns the stored record as read back from the store.
    """
    try:
        user_id = store.create_user(User(username=username, hashed_password=hash_password(password)))
    except DuplicateUser:
        logger.info("Signup failed: username %s already taken", username)
        raise
    logger.info("Signed up user %s", username)
    return store.get_by_id(user_id)


def authenticate_user(store: UserStore, username: str, password: str) -> User:
    """Verify a username/password pair and return the stored user.

    Always runs bcrypt whether or not the user exists, so an attacker cannot
    tell the two failure kinds apart by response time:
    - Unknown username: bcrypt runs against _DUMMY_HASH, then UserNotFound
    - Wrong password: bcrypt runs against the real hash, then PasswordMismatch
    """
    user = store.get_by_username(username)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        logger.info("Login failed: unknown user %s", username)
        raise UserNotFound()
    if not verify_password(password, user.hashed_password):
        logger.info("Login failed: bad password for %s", username)
        raise PasswordMismatch()
    return user


# ---------------------------------------------------------------------------
# Token encode / decode
# ---------------------------------------------------------------------------


def create_access_token(username: str) -> str:
    """Encode a signed token carrying the username as its subject.

    No "exp" claim is added; the session cookie's max_age is the only
    expiry, and it is enforced by the browser alone.
    """
    return jwt.encode({"sub": username}, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify a token and return its claims.

    Raises InvalidSignature if the signature does not match, the token is
    malformed, or the subject claim is missing.
    """
    try:
        payload = jwt.decode(token, _settings.secret_key, algorithms=[_ALGORITHM])
    except JWTError as exc:
        raise InvalidSignature(detail=str(exc)) from exc
    if not isinstance(payload.get("sub"), str) or not payload["sub"]:
        raise InvalidSignature("Session token has no subject.")
    return payload


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def set_auth_cookie(response, token: str) -> None:
    """Write the session token as an httpOnly cookie on the response.

    httponly=True: JS cannot read the cookie.
    path="/": sent with every route.
    domain: fixed by COOKIE_DOMAIN; unset means host-only.
    secure: only sent over HTTPS when SECURE_COOKIES=true.
    samesite="lax": not sent on cross-site POST.
    max_age: COOKIE_MAX_AGE seconds (default one hour).
    """
    response.set_cookie(
        _settings.cookie_name,
        value=token,
        httponly=True,
        path="/",
        domain=_settings.cookie_domain,
        secure=_settings.secure_cookies,
        samesite="lax",
        max_age=_settings.cookie_max_age,
    )


def clear_auth_cookie(response) -> None:
    """Delete the session cookie. path/domain must match set_auth_cookie()."""
    response.delete_cookie(
        _settings.cookie_name,
        path="/",
        domain=_settings.cookie_domain,
        httponly=True,
        secure=_settings.secure_cookies,
        samesite="lax",
    )
