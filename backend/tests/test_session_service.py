import pytest

from app.config import settings
from app.core.exceptions import (
    InvalidCredentialsError,
    InvalidPasswordError,
    InvalidTokenError,
    MissingCredentialsError,
    MissingTokenError,
    TokenMismatchError,
    UserNotFoundError,
)
from app.core.security import create_refresh_token, decode_access_token
from app.models.user import User
from app.schemas.user import UserResponse
from app.services.session_service import session_service
from app.services.user_service import user_service


def test_login_with_username_returns_tokens_and_sanitized_user(db, make_user):
    make_user("alice", "alice@x.com", "P@ss1")

    user, access, refresh = session_service.login(db, username="alice", password="P@ss1")

    assert decode_access_token(access)["sub"] == str(user.id)
    assert user.refresh_token == refresh
    sanitized = UserResponse.model_validate(user).model_dump()
    assert sanitized["username"] == "alice"
    assert "password_hash" not in sanitized
    assert "password" not in sanitized
    assert "refresh_token" not in sanitized


def test_login_is_case_insensitive_on_identifier(db, make_user):
    make_user("alice", "alice@x.com", "P@ss1")

    user, _, _ = session_service.login(db, username="ALICE", password="P@ss1")
    assert user.username == "alice"

    user, _, _ = session_service.login(db, email="Alice@X.com", password="P@ss1")
    assert user.username == "alice"


def test_login_requires_identifier(db):
    with pytest.raises(MissingCredentialsError):
        session_service.login(db, username="  ", email=None, password="P@ss1")


def test_login_requires_password(db, make_user):
    make_user("alice")
    with pytest.raises(MissingCredentialsError):
        session_service.login(db, username="alice", password="")


def test_login_unknown_user(db):
    with pytest.raises(UserNotFoundError):
        session_service.login(db, username="nobody", password="P@ss1")


def test_login_wrong_password(db, make_user):
    user = make_user("alice")
    with pytest.raises(InvalidPasswordError):
        session_service.login(db, username="alice", password="wrong")
    db.refresh(user)
    assert user.refresh_token is None


def test_uniform_login_errors(db, make_user, monkeypatch):
    monkeypatch.setattr(settings, "UNIFORM_LOGIN_ERRORS", True)
    make_user("alice")

    with pytest.raises(InvalidCredentialsError):
        session_service.login(db, username="nobody", password="P@ss1")
    with pytest.raises(InvalidCredentialsError):
        session_service.login(db, username="alice", password="wrong")


def test_login_overwrites_previous_refresh_token(db, make_user):
    make_user("alice")
    _, _, first = session_service.login(db, username="alice", password="P@ss1")
    _, _, second = session_service.login(db, username="alice", password="P@ss1")

    assert first != second
    with pytest.raises(TokenMismatchError):
        session_service.refresh(db, first)
    session_service.refresh(db, second)


def test_refresh_rotates_stored_token(db, make_user):
    make_user("alice")
    _, _, refresh = session_service.login(db, username="alice", password="P@ss1")

    user, access, new_refresh = session_service.refresh(db, refresh)

    assert new_refresh != refresh
    assert user.refresh_token == new_refresh
    assert decode_access_token(access)["sub"] == str(user.id)


def test_old_refresh_token_rejected_after_rotation(db, make_user):
    make_user("alice")
    _, _, original = session_service.login(db, username="alice", password="P@ss1")

    session_service.refresh(db, original)

    with pytest.raises(TokenMismatchError):
        session_service.refresh(db, original)


def test_refresh_after_logout_is_rejected(db, make_user):
    user = make_user("alice")
    _, _, refresh = session_service.login(db, username="alice", password="P@ss1")

    session_service.logout(db, user.id)

    with pytest.raises(TokenMismatchError):
        session_service.refresh(db, refresh)


def test_logout_is_idempotent(db, make_user):
    user = make_user("alice")
    session_service.login(db, username="alice", password="P@ss1")

    session_service.logout(db, user.id)
    session_service.logout(db, user.id)

    assert db.query(User).filter(User.id == user.id).one().refresh_token is None


def test_refresh_requires_token(db):
    with pytest.raises(MissingTokenError):
        session_service.refresh(db, None)
    with pytest.raises(MissingTokenError):
        session_service.refresh(db, "   ")


def test_refresh_rejects_bad_signature(db, make_user):
    make_user("alice")
    with pytest.raises(InvalidTokenError):
        session_service.refresh(db, "abc.def.ghi")


def test_refresh_for_deleted_user(db, make_user):
    user = make_user("alice")
    _, _, refresh = session_service.login(db, username="alice", password="P@ss1")
    db.delete(user)
    db.commit()

    with pytest.raises(UserNotFoundError):
        session_service.refresh(db, refresh)


def test_forged_but_valid_token_does_not_match(db, make_user):
    user = make_user("alice")
    session_service.login(db, username="alice", password="P@ss1")

    # Correctly signed, never stored
    with pytest.raises(TokenMismatchError):
        session_service.refresh(db, create_refresh_token(user.id))


def test_rejected_refresh_leaves_stored_token_untouched(db, make_user):
    user = make_user("alice")
    _, _, current = session_service.login(db, username="alice", password="P@ss1")

    with pytest.raises(TokenMismatchError):
        session_service.refresh(db, create_refresh_token(user.id))

    db.refresh(user)
    assert user.refresh_token == current


def test_refresh_rejects_whitespace_padded_token(db, make_user):
    user = make_user("alice")
    _, _, current = session_service.login(db, username="alice", password="P@ss1")

    with pytest.raises((TokenMismatchError, InvalidTokenError)):
        session_service.refresh(db, "  " + current + "\n")

    db.refresh(user)
    assert user.refresh_token == current


def test_password_change_then_login(db, make_user):
    user = make_user("alice", password="P@ss1")

    user_service.change_password(db, user.id, "P@ss1", "N3w!pass")

    session_service.login(db, username="alice", password="N3w!pass")
    with pytest.raises(InvalidPasswordError):
        session_service.login(db, username="alice", password="P@ss1")


def test_password_change_keeps_session_by_default(db, make_user):
    user = make_user("alice")
    _, _, refresh = session_service.login(db, username="alice", password="P@ss1")

    user_service.change_password(db, user.id, "P@ss1", "N3w!pass")

    session_service.refresh(db, refresh)


def test_password_change_can_revoke_session(db, make_user, monkeypatch):
    monkeypatch.setattr(settings, "REVOKE_SESSIONS_ON_PASSWORD_CHANGE", True)
    user = make_user("alice")
    _, _, refresh = session_service.login(db, username="alice", password="P@ss1")

    user_service.change_password(db, user.id, "P@ss1", "N3w!pass")

    with pytest.raises(TokenMismatchError):
        session_service.refresh(db, refresh)
