from conftest import create_booking, create_member, create_package

from tourdesk.config import UPLOAD_DIR
from tourdesk.domain.members.repository import MemberRepository
from tourdesk.models import User


def pdf(name="passport.pdf", content=b"%PDF-1.4 test"):
    return ("document", (name, content, "application/pdf"))


def test_create_member_assigns_sequential_ids_and_login(client, staff_headers, db):
    first = create_member(client, staff_headers)
    second = create_member(client, staff_headers, name="Vikram Singh", mobile_no="9123456780")

    assert first["id"] == "ALMB00001"
    assert second["id"] == "ALMB00002"
    assert first["userId"] == first["id"]

    user = db.query(User).filter(User.id == first["id"]).one()
    assert user.role == "MEMBER"
    assert user.name == "Asha Rao"
    assert user.email == "almb00001@members.tourdesk.local"


def test_member_login_account_can_sign_in(client, staff_headers):
    member = create_member(client, staff_headers)

    response = client.post(
        "/login", json={"email": f"{member['id'].lower()}@members.tourdesk.local", "password": "Member@12345"}
    )

    assert response.status_code == 200
    assert response.json()["data"]["user"]["role"] == "MEMBER"


def test_create_member_stores_documents(client, staff_headers):
    member = create_member(client, staff_headers, files=[pdf(), pdf("visa.pdf", b"visa")])

    documents = member["document"]
    assert [d["originalName"] for d in documents] == ["passport.pdf", "visa.pdf"]
    for doc in documents:
        assert doc["path"].startswith(f"member/{member['id']}/")
        assert (UPLOAD_DIR / doc["path"]).is_file()
        assert doc["mimetype"] == "application/pdf"


def test_create_member_validation_errors(client, staff_headers):
    response = client.post(
        "/members",
        data={"name": "A", "mobileNo": "12345", "address": "Somewhere"},
        files=[pdf()],
        headers=staff_headers,
    )

    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"name", "mobileNo"}
    assert not (UPLOAD_DIR / "member").exists()


def test_too_many_files_leaves_nothing_on_disk(client, staff_headers, db):
    files = [pdf(f"doc{i}.pdf") for i in range(11)]

    response = client.post(
        "/members",
        data={"name": "Asha Rao", "mobileNo": "9876543210", "address": "12 Lake Road"},
        files=files,
        headers=staff_headers,
    )

    assert response.status_code == 400
    assert "maximum 10" in response.json()["message"]
    assert not (UPLOAD_DIR / "member" / "ALMB00001").exists()
    assert db.query(User).count() == 1  # only the acting staff user


def test_extra_must_be_json_object(client, staff_headers):
    response = client.post(
        "/members",
        data={"name": "Asha Rao", "mobileNo": "9876543210", "address": "12 Lake Road", "extra": "[1, 2]"},
        headers=staff_headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "extra"


def test_list_members_with_filters(client, staff_headers):
    create_member(client, staff_headers, name="Asha Rao", mobile_no="9876543210")
    create_member(client, staff_headers, name="Vikram Singh", mobile_no="9123456780")

    by_name = client.get("/members", params={"name": "vikram"}, headers=staff_headers).json()["data"]
    by_mobile = client.get("/members", params={"mobileNo": "98765"}, headers=staff_headers).json()["data"]

    assert [m["name"] for m in by_name["items"]] == ["Vikram Singh"]
    assert [m["name"] for m in by_mobile["items"]] == ["Asha Rao"]
    assert by_name["total"] == 1


def test_get_member_includes_bookings(client, staff_headers):
    member = create_member(client, staff_headers)
    package = create_package(client, staff_headers)
    booking = create_booking(client, staff_headers, [member["id"]], package["id"])

    response = client.get(f"/members/{member['id']}", headers=staff_headers)

    assert response.status_code == 200
    assert [b["id"] for b in response.json()["data"]["bookings"]] == [booking["id"]]


def test_get_missing_member_is_404(client, staff_headers):
    response = client.get("/members/ALMB09999", headers=staff_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Member not found"


def test_members_by_user(client, staff_headers):
    member = create_member(client, staff_headers)

    response = client.get(f"/members/user/{member['id']}", headers=staff_headers)

    assert [m["id"] for m in response.json()["data"]] == [member["id"]]


def test_update_member_appends_documents(client, staff_headers):
    member = create_member(client, staff_headers, files=[pdf()])

    response = client.put(
        f"/members/{member['id']}",
        data={"address": "44 Hill View, Shimla"},
        files=[pdf("visa.pdf", b"visa")],
        headers=staff_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["address"] == "44 Hill View, Shimla"
    assert [d["originalName"] for d in data["document"]] == ["passport.pdf", "visa.pdf"]


def test_update_member_replace_documents_deletes_old_files(client, staff_headers):
    member = create_member(client, staff_headers, files=[pdf()])
    old_path = UPLOAD_DIR / member["document"][0]["path"]

    response = client.put(
        f"/members/{member['id']}",
        data={"replaceDocuments": "true"},
        files=[pdf("visa.pdf", b"visa")],
        headers=staff_headers,
    )

    data = response.json()["data"]
    assert [d["originalName"] for d in data["document"]] == ["visa.pdf"]
    assert not old_path.exists()
    assert (UPLOAD_DIR / data["document"][0]["path"]).is_file()


def test_update_member_address_needs_five_characters(client, staff_headers):
    member = create_member(client, staff_headers)

    response = client.put(f"/members/{member['id']}", data={"address": "Goa"}, headers=staff_headers)

    assert response.status_code == 400


def test_update_member_without_changes_is_rejected(client, staff_headers):
    member = create_member(client, staff_headers)

    response = client.put(f"/members/{member['id']}", data={}, headers=staff_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "No fields to update"


def test_download_and_delete_document(client, staff_headers):
    member = create_member(client, staff_headers, files=[pdf(content=b"passport-bytes")])
    filename = member["document"][0]["filename"]

    listing = client.get(f"/members/{member['id']}/documents", headers=staff_headers)
    download = client.get(f"/members/{member['id']}/documents/{filename}", headers=staff_headers)

    assert [d["filename"] for d in listing.json()["data"]] == [filename]
    assert download.status_code == 200
    assert download.content == b"passport-bytes"
    assert "passport.pdf" in download.headers["content-disposition"]

    deleted = client.delete(f"/members/{member['id']}/documents/{filename}", headers=staff_headers)
    assert deleted.status_code == 200
    assert deleted.json()["data"]["document"] == []
    assert client.get(f"/members/{member['id']}/documents/{filename}", headers=staff_headers).status_code == 404


def test_download_document_missing_on_disk(client, staff_headers):
    member = create_member(client, staff_headers, files=[pdf()])
    doc = member["document"][0]
    (UPLOAD_DIR / doc["path"]).unlink()

    response = client.get(f"/members/{member['id']}/documents/{doc['filename']}", headers=staff_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Document not found on server"


def test_delete_member_removes_files(client, staff_headers):
    member = create_member(client, staff_headers, files=[pdf()])

    response = client.delete(f"/members/{member['id']}", headers=staff_headers)

    assert response.status_code == 200
    assert not (UPLOAD_DIR / "member" / member["id"]).exists()
    assert client.get(f"/members/{member['id']}", headers=staff_headers).status_code == 404


def test_bulk_delete_reports_failures(client, staff_headers):
    first = create_member(client, staff_headers)
    second = create_member(client, staff_headers, name="Vikram Singh", mobile_no="9123456780")

    response = client.post(
        "/members/bulk-delete", json={"memberIds": [first["id"], "ALMB09999", second["id"]]}, headers=staff_headers
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"deletedCount": 2, "failedIds": ["ALMB09999"]}


def test_member_stats(client, staff_headers):
    member = create_member(client, staff_headers)
    create_member(client, staff_headers, name="Vikram Singh", mobile_no="9123456780")
    package = create_package(client, staff_headers)
    create_booking(client, staff_headers, [member["id"]], package["id"])

    response = client.get("/members/stats", headers=staff_headers)

    assert response.json()["data"] == {"total": 2, "newThisMonth": 2, "withBookings": 1}


def test_member_ids_continue_after_login_user_is_deleted(client, staff_headers, admin_headers):
    create_member(client, staff_headers)
    second = create_member(client, staff_headers, name="Vikram Singh", mobile_no="9123456780")

    assert client.delete(f"/users/{second['id']}", headers=admin_headers).status_code == 200

    third = create_member(client, staff_headers, name="Meera Nair", mobile_no="9988776655")
    assert third["id"] == "ALMB00003"
    assert client.get(f"/members/{second['id']}", headers=staff_headers).status_code == 200


def test_taken_member_id_conflicts_and_keeps_existing_files(client, staff_headers, monkeypatch):
    existing = create_member(client, staff_headers, files=[pdf()])
    monkeypatch.setattr(MemberRepository, "last_member_code", staticmethod(lambda db, prefix: None))

    response = client.post(
        "/members",
        data={"name": "Meera Nair", "mobileNo": "9988776655", "address": "4 Hill Street, Ooty"},
        files=[pdf("ticket.pdf", b"ticket")],
        headers=staff_headers,
    )

    assert response.status_code == 409
    assert response.json()["success"] is False
    stored = list((UPLOAD_DIR / "member" / existing["id"]).iterdir())
    assert [path.name for path in stored] == [existing["document"][0]["filename"]]
    member = client.get(f"/members/{existing['id']}", headers=staff_headers).json()["data"]
    assert member["name"] == "Asha Rao"
