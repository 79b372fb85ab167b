from datetime import timedelta

import pytest

from app.core.exceptions import AccessDeniedError, AuthenticationError, ConflictError, InvalidTokenError, TokenExpiredError
from app.models.user import User, UserRole
from app.services import auth as auth_service
PASSWORD = "Password123!"


def test_password_hashing():
    """Test that password hashing and verification works correctly."""
    password = "MySecurePassword123!"
    hashed = auth_service.get_password_hash(password)
    assert hashed != password
    assert auth_service.verify_password(password, hashed)
    assert not auth_service.verify_password("WrongPassword", hashed)


def test_verify_password_with_malformed_hash():
    assert not auth_service.verify_password("anything", "not-a-bcrypt-hash")


def test_access_token_round_trip(member):
    payload = auth_service.decode_token(auth_service.create_access_token(member))
    assert payload["id"] == member.id
    assert payload["email"] == member.email
    assert payload["role"] == "MEMBER"
    assert payload["type"] == "access"


def test_expired_token_raises(member):
    token = auth_service.create_access_token(member, expires_delta=timedelta(seconds=-5))
    with pytest.raises(TokenExpiredError):
        auth_service.decode_token(token)


def test_tampered_token_raises(member):
    token = auth_service.create_access_token(member)
    with pytest.raises(InvalidTokenError):
        auth_service.decode_token(token[:-2] + ("aa" if not token.endswith("aa") else "bb"))


def test_register_user_creates_member(db_session):
    """Test creating a new user through the service."""
    user = auth_service.register_user(db_session, "NewUser@Example.com", "secret1", "New", "User")

    saved_user = db_session.query(User).filter(User.email == "newuser@example.com").first()
    assert saved_user is not None
    assert saved_user.id == user.id
    assert saved_user.role == UserRole.MEMBER
    assert saved_user.display_name == "New User"
    assert auth_service.verify_password("secret1", saved_user.hashed_password)


def test_register_duplicate_email(db_session, member):
    with pytest.raises(ConflictError):
        auth_service.register_user(db_session, member.email, "secret1", "Dup", "User")


def test_authenticate_stamps_last_login(db_session, member):
    assert member.last_login is None
    user = auth_service.authenticate(db_session, member.email, PASSWORD)
    assert user.last_login is not None


def test_authenticate_rejects_inactive_user(db_session, make_user):
    user = make_user(is_active=False)
    with pytest.raises(AccessDeniedError):
        auth_service.authenticate(db_session, user.email, PASSWORD)


def test_refresh_rejects_access_token(db_session, member):
    with pytest.raises(AuthenticationError):
        auth_service.refresh(db_session, auth_service.create_access_token(member))
