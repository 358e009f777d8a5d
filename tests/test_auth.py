from conftest import TEST_PASSWORD, headers_for

from tourdesk.models import UserRole
from tourdesk.security_utils import create_access_token, verify_access_token


def test_first_admin_can_self_register(client):
    response = client.post(
        "/register",
        json={"email": "Owner@Tourdesk.test", "password": "Str0ngPass", "name": "Owner", "role": "ADMIN"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["statusCode"] == 201
    assert body["data"]["email"] == "owner@tourdesk.test"
    assert body["data"]["role"] == "ADMIN"


def test_register_defaults_to_member(client):
    response = client.post("/register", json={"email": "guest@tourdesk.test", "password": "Str0ngPass"})

    assert response.status_code == 201
    assert response.json()["data"]["role"] == "MEMBER"


def test_staff_roles_cannot_self_register_once_admin_exists(client, admin):
    response = client.post(
        "/register",
        json={"email": "sneaky@tourdesk.test", "password": "Str0ngPass", "role": "STAFF"},
    )

    assert response.status_code == 403
    assert response.json()["success"] is False


def test_register_duplicate_email_conflicts(client, admin):
    response = client.post("/register", json={"email": admin.email, "password": "Str0ngPass"})

    assert response.status_code == 409
    assert response.json()["message"] == "User with this email already exists"


def test_register_rejects_weak_password(client):
    response = client.post("/register", json={"email": "weak@tourdesk.test", "password": "short"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert body["errors"][0]["field"] == "password"


def test_login_returns_token_with_user_and_role(client, admin):
    response = client.post("/login", json={"email": admin.email, "password": TEST_PASSWORD})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == admin.id
    assert data["user"]["role"] == "ADMIN"
    assert "passwordHash" not in data["user"]

    payload = verify_access_token(data["token"])
    assert payload["userId"] == admin.id
    assert payload["role"] == "ADMIN"


def test_login_with_wrong_password_is_unauthorized(client, admin):
    response = client.post("/login", json={"email": admin.email, "password": "WrongPass1"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_protected_route_requires_bearer_token(client):
    response = client.get("/enquiries")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_invalid_token_is_unauthorized(client):
    response = client.get("/enquiries", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_token_for_deleted_user_is_unauthorized(client):
    token = create_access_token("no-such-user", "ADMIN")

    response = client.get("/enquiries", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_member_role_is_forbidden_from_staff_routes(client, make_user):
    member_user = make_user(UserRole.MEMBER)

    response = client.get("/members", headers=headers_for(member_user))

    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden: insufficient role"


def test_me_returns_current_user(client, staff, staff_headers):
    response = client.get("/me", headers=staff_headers)

    assert response.status_code == 200
    assert response.json()["data"]["email"] == staff.email
