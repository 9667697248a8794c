from datetime import timedelta

import jwt

from app.config import get_settings
from app.services.auth import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("password123")
    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)


def test_token_carries_email_and_role():
    token = create_access_token("kim@lunch.test", "editor")
    payload = decode_access_token(token)
    assert payload["sub"] == "kim@lunch.test"
    assert payload["role"] == "editor"
    assert payload["exp"] > payload["iat"]


def test_expired_token_is_rejected():
    token = create_access_token("kim@lunch.test", "viewer", expires_delta=timedelta(seconds=-1))
    assert decode_access_token(token) is None


def test_token_signed_with_other_key_is_rejected():
    algorithm = get_settings().jwt.algorithm
    token = jwt.encode({"sub": "kim@lunch.test"}, "another-secret-key-of-enough-length", algorithm=algorithm)
    assert decode_access_token(token) is None


def test_garbage_token_is_rejected():
    assert decode_access_token("not.a.jwt") is None
