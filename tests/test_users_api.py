from fastapi import status
from app.models.user import User, UserRole

API = "/api/v1/users"


def test_list_users_requires_admin(client, member, auth_headers):
    response = client.get(API, headers=auth_headers(member))
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["message"] == "User role MEMBER is not authorized to access this route"


def test_list_users_paginates_and_hides_inactive(client, admin_user, make_user, auth_headers):
    for _ in range(3):
        make_user()
    make_user(is_active=False)

    response = client.get(API, params={"page": 1, "limit": 2}, headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["success"] is True
    assert len(body["data"]) == 2
    assert body["pagination"] == {"total": 4, "page": 1, "limit": 2, "totalPages": 2}


def test_list_users_search(client, admin_user, make_user, auth_headers):
    make_user(display_name="Grace Hopper")
    response = client.get(API, params={"search": "hopper"}, headers=auth_headers(admin_user))
    names = [user["displayName"] for user in response.json()["data"]]
    assert names == ["Grace Hopper"]


def test_invalid_page_is_rejected(client, admin_user, auth_headers):
    response = client.get(API, params={"page": 0}, headers=auth_headers(admin_user))
    assert response.status_code == 422


def test_get_own_profile_but_not_others(client, member, make_user, auth_headers):
    other = make_user()
    assert client.get(f"{API}/{member.id}", headers=auth_headers(member)).status_code == 200
    response = client.get(f"{API}/{other.id}", headers=auth_headers(member))
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["message"] == "You do not have permission to access this resource"


def test_admin_can_read_any_profile(client, admin_user, member, auth_headers):
    response = client.get(f"{API}/{member.id}", headers=auth_headers(admin_user))
    assert response.json()["data"]["email"] == member.email


def test_unknown_user_is_404(client, admin_user, auth_headers):
    response = client.get(f"{API}/does-not-exist", headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["message"] == "User not found"


def test_update_own_profile(client, member, auth_headers):
    response = client.put(
        f"{API}/{member.id}",
        json={"displayName": "Renamed", "title": "Engineer", "phoneNumber": "555-0100"},
        headers=auth_headers(member),
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["displayName"] == "Renamed"
    assert data["title"] == "Engineer"
    assert data["phoneNumber"] == "555-0100"


def test_last_super_admin_role_cannot_change(client, db_session, super_admin, admin_user, auth_headers):
    response = client.put(
        f"{API}/{super_admin.id}/role", json={"role": "MEMBER"}, headers=auth_headers(admin_user)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "last Super Admin" in response.json()["message"]
    db_session.refresh(super_admin)
    assert super_admin.role == UserRole.SUPER_ADMIN


def test_super_admin_can_be_demoted_when_another_exists(client, super_admin, make_user, auth_headers):
    second = make_user(UserRole.SUPER_ADMIN)
    response = client.patch(f"{API}/{second.id}/role", json={"role": "ADMIN"}, headers=auth_headers(super_admin))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["role"] == "ADMIN"


def test_patch_role_requires_super_admin(client, admin_user, member, auth_headers):
    response = client.patch(f"{API}/{member.id}/role", json={"role": "LEADER"}, headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_invalid_role_is_validation_error(client, admin_user, member, auth_headers):
    response = client.put(f"{API}/{member.id}/role", json={"role": "CEO"}, headers=auth_headers(admin_user))
    assert response.status_code == 422


def test_delete_last_super_admin_fails(client, db_session, super_admin, auth_headers):
    response = client.delete(f"{API}/{super_admin.id}", headers=auth_headers(super_admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Cannot delete the last Super Admin"
    db_session.refresh(super_admin)
    assert super_admin.is_active is True


def test_delete_is_soft(client, db_session, admin_user, member, auth_headers):
    email = member.email
    response = client.delete(f"{API}/{member.id}", headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert response.content == b""

    stored = db_session.get(User, member.id)
    assert stored.is_active is False
    assert stored.email.startswith("deleted-")
    assert stored.email.endswith(email)


def test_deleting_inactive_user_is_404(client, db_session, admin_user, member, auth_headers):
    headers = auth_headers(admin_user)
    assert client.delete(f"{API}/{member.id}", headers=headers).status_code == status.HTTP_204_NO_CONTENT
    email = db_session.get(User, member.id).email

    again = client.delete(f"{API}/{member.id}", headers=headers)
    assert again.status_code == status.HTTP_404_NOT_FOUND
    db_session.refresh(member)
    assert member.email == email
    assert member.email.count("deleted-") == 1


def test_admins_listing_and_creation(client, super_admin, admin_user, member, auth_headers):
    listing = client.get(f"{API}/admins", headers=auth_headers(super_admin))
    ids = {user["id"] for user in listing.json()["data"]}
    assert ids == {super_admin.id, admin_user.id}

    created = client.post(f"{API}/admins", json={
        "email": "second-admin@example.com",
        "password": "secret123",
        "firstName": "Second",
        "lastName": "Admin",
    }, headers=auth_headers(super_admin))
    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["data"]["role"] == "ADMIN"

    duplicate = client.post(f"{API}/admins", json={
        "email": member.email, "password": "secret123", "firstName": "X", "lastName": "Y",
    }, headers=auth_headers(super_admin))
    assert duplicate.status_code == status.HTTP_409_CONFLICT
    assert duplicate.json()["message"] == "User already exists"


def test_admins_endpoints_require_super_admin(client, admin_user, auth_headers):
    assert client.get(f"{API}/admins", headers=auth_headers(admin_user)).status_code == 403


def test_team_members_scoped_to_own_team(client, make_user, make_team, auth_headers):
    leader = make_user(UserRole.LEADER)
    team = make_team(leader=leader)
    teammate = make_user(team=team)
    make_user(team=make_team())

    response = client.get(f"{API}/team/members", headers=auth_headers(leader))
    assert response.status_code == status.HTTP_200_OK
    assert {user["id"] for user in response.json()["data"]} == {leader.id, teammate.id}


def test_team_members_denied_for_members(client, member, auth_headers):
    assert client.get(f"{API}/team/members", headers=auth_headers(member)).status_code == 403
