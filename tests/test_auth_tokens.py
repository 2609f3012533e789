"""Unit tests for auth/tokens.py and auth/store.py.

Covers:
- bcrypt hashing uses cost factor 10 and a fresh salt per call
- signup() persists the user; a duplicate username raises DuplicateUser and
  leaves the original record untouched
- authenticate_user() distinguishes UserNotFound from PasswordMismatch
- create_access_token()/decode_access_token(): subject round trip, no expiry
  claim, and InvalidSignature on tampered, foreign-key or malformed tokens
- get_current_user() attaches the session username to request.state
"""

import logging

import pytest
from jose import jwt
from starlette.requests import Request

from auth.dependencies import get_current_user
from auth.store import UserStore
from auth.tokens import (
    authenticate_user,
    create_access_token,
    decode_access_token,
    hash_password,
    signup,
    verify_password,
)
from core.config import get_settings
from core.errors import DuplicateUser, InvalidSignature, PasswordMismatch, UserNotFound


@pytest.fixture
def user_store():
    s = UserStore("sqlite:///:memory:")
    yield s
    s.close()


class TestPasswordHashing:
    def test_hash_uses_cost_factor_10(self):
        assert hash_password("hunter2").startswith("$2b$10$")

    def test_hash_is_salted(self):
        assert hash_password("hunter2") != hash_password("hunter2")

    def test_verify_accepts_correct_password(self):
        assert verify_password("hunter2", hash_password("hunter2"))

    def test_verify_rejects_wrong_password(self):
        assert not verify_password("hunter3", hash_password("hunter2"))

    def test_verify_treats_malformed_hash_as_mismatch(self):
        assert not verify_password("hunter2", "not-a-bcrypt-hash")


class TestSignupAndAuthenticate:
    def test_signup_persists_hashed_user(self, user_store):
        user = signup(user_store, "alice", "wonderland")
        assert user.id is not None
        assert user.username == "alice"
        assert user.hashed_password != "wonderland"
        assert user_store.get_by_username("alice") == user

    def test_duplicate_signup_raises_and_keeps_original(self, user_store):
        original = signup(user_store, "alice", "wonderland")
        with pytest.raises(DuplicateUser):
            signup(user_store, "alice", "other-password")
        assert user_store.get_by_username("alice").hashed_password == original.hashed_password

    def test_duplicate_signup_is_logged(self, user_store, caplog):
        signup(user_store, "alice", "wonderland")
        with caplog.at_level(logging.INFO, logger="peopleapi.auth"):
            with pytest.raises(DuplicateUser):
                signup(user_store, "alice", "again")
        assert any("already taken" in r.getMessage() and "alice" in r.getMessage() for r in caplog.records)

    def test_authenticate_returns_user(self, user_store):
        signup(user_store, "alice", "wonderland")
        assert authenticate_user(user_store, "alice", "wonderland").username == "alice"

    def test_authenticate_unknown_user(self, user_store):
        with pytest.raises(UserNotFound):
            authenticate_user(user_store, "nobody", "whatever")

    def test_authenticate_wrong_password(self, user_store):
        signup(user_store, "alice", "wonderland")
        with pytest.raises(PasswordMismatch):
            authenticate_user(user_store, "alice", "looking-glass")


class TestTokens:
    def test_round_trip_carries_username(self):
        assert decode_access_token(create_access_token("alice"))["sub"] == "alice"

    def test_token_has_no_expiry_claim(self):
        assert "exp" not in decode_access_token(create_access_token("alice"))

    def test_tampered_signature_rejected(self):
        token = create_access_token("alice")
        header, payload, signature = token.split(".")
        mid = len(signature) // 2
        flipped = "A" if signature[mid] != "A" else "B"
        tampered = f"{header}.{payload}.{signature[:mid]}{flipped}{signature[mid + 1:]}"
        with pytest.raises(InvalidSignature):
            decode_access_token(tampered)

    def test_forged_payload_rejected(self):
        alice = create_access_token("alice").split(".")
        bob = create_access_token("bob").split(".")
        with pytest.raises(InvalidSignature):
            decode_access_token(f"{alice[0]}.{bob[1]}.{alice[2]}")

    def test_token_signed_with_other_key_rejected(self):
        foreign = jwt.encode({"sub": "alice"}, "x" * 64, algorithm="HS256")
        with pytest.raises(InvalidSignature):
            decode_access_token(foreign)

    def test_malformed_token_rejected(self):
        with pytest.raises(InvalidSignature):
            decode_access_token("not-a-token")

    def test_token_without_subject_rejected(self):
        token = jwt.encode({"user": "alice"}, get_settings().secret_key, algorithm="HS256")
        with pytest.raises(InvalidSignature):
            decode_access_token(token)


def _request_with_cookie(token: str) -> Request:
    return Request({"type": "http", "method": "GET", "path": "/people", "headers": [(b"cookie", f"token={token}".encode())]})


def test_gate_attaches_username_to_request_state():
    request = _request_with_cookie(create_access_token("alice"))
    assert get_current_user(request) == "alice"
    assert request.state.username == "alice"
