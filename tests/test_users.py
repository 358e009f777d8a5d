import csv
import io

from conftest import TEST_PASSWORD

from tourdesk.models import UserRole


def test_list_users_paginates_and_filters(client, admin_headers, make_user):
    for _ in range(3):
        make_user(UserRole.STAFF)
    make_user(UserRole.MANAGER, email="lead@tourdesk.test", name="Team Lead")

    response = client.get("/users", params={"role": "STAFF", "limit": 2}, headers=admin_headers)

    assert response.status_code == 200
    page = response.json()["data"]
    assert page["total"] == 3
    assert page["totalPages"] == 2
    assert len(page["items"]) == 2
    assert all(u["role"] == "STAFF" for u in page["items"])

    response = client.get("/users", params={"search": "LEAD"}, headers=admin_headers)
    assert [u["email"] for u in response.json()["data"]["items"]] == ["lead@tourdesk.test"]


def test_limit_above_cap_is_rejected(client, admin_headers):
    response = client.get("/users", params={"limit": 150}, headers=admin_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"][0]["field"] == "limit"


def test_page_must_be_positive(client, admin_headers):
    response = client.get("/users", params={"page": 0}, headers=admin_headers)

    assert response.status_code == 400


def test_staff_cannot_manage_users(client, staff_headers):
    assert client.get("/users", headers=staff_headers).status_code == 403


def test_create_user_and_reject_duplicate_email(client, admin_headers):
    payload = {"email": "new.staff@tourdesk.test", "password": "Welcome123", "name": "New Staff", "role": "STAFF"}

    created = client.post("/users", json=payload, headers=admin_headers)
    duplicate = client.post("/users", json=payload, headers=admin_headers)

    assert created.status_code == 201
    assert created.json()["data"]["role"] == "STAFF"
    assert duplicate.status_code == 409


def test_update_user_changes_only_supplied_fields(client, admin_headers, make_user):
    user = make_user(UserRole.STAFF, name="Before")

    response = client.put(f"/users/{user.id}", json={"role": "MANAGER"}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == "MANAGER"
    assert data["name"] == "Before"


def test_update_user_ignores_null_fields(client, admin_headers, make_user):
    user = make_user(UserRole.STAFF, email="kept@tourdesk.test", name="Before")

    response = client.put(f"/users/{user.id}", json={"email": None, "role": None}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "No fields to update"

    response = client.put(f"/users/{user.id}", json={"email": None, "name": "After"}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "After"
    assert data["email"] == "kept@tourdesk.test"
    assert data["role"] == "STAFF"


def test_update_user_email_taken_conflicts(client, admin, admin_headers, make_user):
    user = make_user(UserRole.STAFF)

    response = client.put(f"/users/{user.id}", json={"email": admin.email}, headers=admin_headers)

    assert response.status_code == 409


def test_admin_cannot_delete_own_account(client, admin, admin_headers):
    response = client.delete(f"/users/{admin.id}", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "You cannot delete your own account"
    assert client.get(f"/users/{admin.id}", headers=admin_headers).status_code == 200


def test_only_admin_can_delete_users(client, manager_headers, make_user):
    user = make_user(UserRole.STAFF)

    response = client.delete(f"/users/{user.id}", headers=manager_headers)

    assert response.status_code == 403


def test_delete_user(client, admin_headers, make_user):
    user = make_user(UserRole.STAFF)

    assert client.delete(f"/users/{user.id}", headers=admin_headers).status_code == 200
    assert client.get(f"/users/{user.id}", headers=admin_headers).status_code == 404
    assert client.delete(f"/users/{user.id}", headers=admin_headers).status_code == 404


def test_reset_password_allows_login_with_new_password(client, admin_headers, make_user):
    user = make_user(UserRole.STAFF)

    response = client.post(
        f"/users/{user.id}/reset-password", json={"newPassword": "Changed456"}, headers=admin_headers
    )

    assert response.status_code == 200
    assert client.post("/login", json={"email": user.email, "password": TEST_PASSWORD}).status_code == 401
    assert client.post("/login", json={"email": user.email, "password": "Changed456"}).status_code == 200


def test_export_users_csv(client, admin, admin_headers, make_user):
    make_user(UserRole.STAFF, email="csv@tourdesk.test", name="Csv Person")

    response = client.get("/users/export", params={"role": "STAFF"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=users_export_" in response.headers["content-disposition"]

    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0] == ["ID", "Name", "Email", "Role", "Created At", "Updated At"]
    assert [row[2] for row in rows[1:]] == ["csv@tourdesk.test"]
