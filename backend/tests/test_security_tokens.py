from datetime import timedelta

import pytest

from app.config import settings
from app.core.exceptions import InvalidTokenError
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)


def test_access_token_round_trip():
    token = create_access_token(7, {"username": "alice", "email": "alice@x.com"})
    payload = decode_access_token(token)
    assert payload["sub"] == "7"
    assert payload["typ"] == "access"
    assert payload["username"] == "alice"
    assert "exp" in payload and "jti" in payload


def test_refresh_token_round_trip():
    token = create_refresh_token(9)
    payload = decode_refresh_token(token)
    assert payload["sub"] == "9"
    assert payload["typ"] == "refresh"


def test_access_token_rejects_refresh_token():
    refresh = create_refresh_token(1)
    with pytest.raises(InvalidTokenError):
        decode_access_token(refresh)


def test_refresh_token_rejects_access_token():
    access = create_access_token(1)
    with pytest.raises(InvalidTokenError):
        decode_refresh_token(access)


def test_refresh_token_signed_with_refresh_secret():
    token = create_refresh_token(3)
    with pytest.raises(InvalidTokenError):
        decode_token(token, settings.ACCESS_TOKEN_SECRET, "refresh")


def test_expired_token_is_invalid():
    token = create_access_token(1, expires_delta=timedelta(minutes=-5))
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_garbage_token_is_invalid():
    with pytest.raises(InvalidTokenError):
        decode_refresh_token("not-a-jwt")


def test_tokens_issued_back_to_back_differ():
    assert create_refresh_token(5) != create_refresh_token(5)


def test_password_hash_and_verify():
    hashed = get_password_hash("P@ss1")
    assert hashed != "P@ss1"
    assert verify_password("P@ss1", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_password_hash_is_salted():
    assert get_password_hash("same") != get_password_hash("same")


def test_verify_password_never_raises_on_bad_hash():
    assert verify_password("P@ss1", "not-a-bcrypt-hash") is False
    assert verify_password("", get_password_hash("x")) is False
