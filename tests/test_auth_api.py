from fastapi import status
from app.services import auth as auth_service
PASSWORD = "Password123!"

API = "/api/v1/auth"


def test_auth_test_endpoint(client):
    response = client.get(f"{API}/test")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["success"] is True


def test_register_returns_member_and_tokens(client):
    response = client.post(f"{API}/register", json={
        "email": "fresh@example.com",
        "password": "secret123",
        "firstName": "Fresh",
        "lastName": "Hire",
    })
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()["data"]
    assert data["user"]["role"] == "MEMBER"
    assert data["user"]["displayName"] == "Fresh Hire"
    assert data["tokens"]["accessToken"]
    assert data["tokens"]["refreshToken"]
    assert data["tokens"]["expiresIn"] == 3600


def test_register_duplicate_email(client, member):
    response = client.post(f"{API}/register", json={
        "email": member.email, "password": "secret123", "firstName": "A", "lastName": "B",
    })
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"success": False, "message": "Email already in use"}


def test_register_validation_error(client):
    response = client.post(f"{API}/register", json={"email": "not-an-email", "password": "x"})
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    fields = {error["field"] for error in body["errors"]}
    assert {"email", "password"} <= fields


def test_login_success(client, admin_user):
    """Test successful login with valid credentials."""
    response = client.post(f"{API}/login", json={"email": admin_user.email, "password": PASSWORD})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["user"]["id"] == admin_user.id
    assert data["user"]["lastLogin"] is not None
    assert "accessToken" in data["tokens"]


def test_login_invalid_credentials(client):
    """Test login failure with wrong password."""
    response = client.post(f"{API}/login", json={"email": "nonexistent@example.com", "password": "wrong"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Invalid email or password"


def test_login_deactivated_account(client, make_user):
    user = make_user(is_active=False)
    response = client.post(f"{API}/login", json={"email": user.email, "password": PASSWORD})
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_me_requires_token(client):
    response = client.get(f"{API}/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"success": False, "message": "No token provided"}


def test_me_with_invalid_token(client):
    response = client.get(f"{API}/me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Invalid token"


def test_me_returns_current_user(client, member, auth_headers):
    response = client.get(f"{API}/me", headers=auth_headers(member))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["email"] == member.email


def test_token_of_deactivated_user_is_rejected(client, db_session, member, auth_headers):
    headers = auth_headers(member)
    member.is_active = False
    db_session.commit()
    response = client.get(f"{API}/me", headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "User no longer exists or is inactive"


def test_refresh_token_required(client):
    response = client.post(f"{API}/refresh-token", json={})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Refresh token is required"


def test_refresh_token_issues_new_pair(client, member):
    refresh_token = auth_service.create_refresh_token(member)
    response = client.post(f"{API}/refresh-token", json={"refreshToken": refresh_token})
    assert response.status_code == status.HTTP_200_OK
    tokens = response.json()["data"]
    assert auth_service.decode_token(tokens["accessToken"])["type"] == "access"


def test_refresh_token_cannot_authenticate_requests(client, member):
    headers = {"Authorization": f"Bearer {auth_service.create_refresh_token(member)}"}
    response = client.get(f"{API}/me", headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_logout(client, member, auth_headers):
    response = client.post(f"{API}/logout", headers=auth_headers(member))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["message"] == "Successfully logged out"
