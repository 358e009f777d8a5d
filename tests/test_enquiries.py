from datetime import datetime, timedelta

from conftest import headers_for

from tourdesk.models import EnquiryForm, UserRole

ENQUIRY = {"name": "Ravi Kumar", "phone": "+91 98765-43210", "purpose": "Family trip to Kerala in December"}


def create_enquiry(client, headers, **overrides):
    response = client.post("/enquiries", json={**ENQUIRY, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_create_enquiry_records_creator(client, staff, staff_headers):
    enquiry = create_enquiry(client, staff_headers)

    assert enquiry["status"] == "PENDING"
    assert enquiry["createdById"] == staff.id


def test_create_enquiry_validates_fields(client, staff_headers):
    response = client.post(
        "/enquiries", json={"name": "R", "phone": "call me", "purpose": "short"}, headers=staff_headers
    )

    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"name", "phone", "purpose"}


def test_managers_have_no_enquiry_access(client, manager_headers):
    assert client.get("/enquiries", headers=manager_headers).status_code == 403


def test_pagination_returns_second_page(client, admin, admin_headers, db):
    start = datetime(2024, 1, 1)
    for i in range(25):
        db.add(
            EnquiryForm(
                name=f"Lead {i:02d}",
                phone="9999999999",
                purpose="Looking for a weekend getaway",
                created_by_id=admin.id,
                created_at=start + timedelta(minutes=i),
            )
        )
    db.commit()

    response = client.get("/enquiries", params={"page": 2, "limit": 10}, headers=admin_headers)

    assert response.status_code == 200
    page = response.json()["data"]
    assert page["total"] == 25
    assert page["totalPages"] == 3
    assert page["page"] == 2
    # newest first: rows 11-20 are leads 14 down to 05
    assert [e["name"] for e in page["items"]] == [f"Lead {i:02d}" for i in range(14, 4, -1)]


def test_staff_only_see_their_own_enquiries(client, admin_headers, staff_headers, make_user):
    other_staff_headers = headers_for(make_user(UserRole.STAFF))
    create_enquiry(client, staff_headers, name="Mine")
    create_enquiry(client, other_staff_headers, name="Theirs")

    mine = client.get("/enquiries", headers=staff_headers).json()["data"]
    everything = client.get("/enquiries", headers=admin_headers).json()["data"]

    assert [e["name"] for e in mine["items"]] == ["Mine"]
    assert mine["total"] == 1
    assert everything["total"] == 2


def test_search_and_status_filter(client, admin_headers):
    create_enquiry(client, admin_headers, name="Meera Shah", phone="1112223333")
    create_enquiry(client, admin_headers, name="John Dsouza", status="BOOKED")

    by_phone = client.get("/enquiries", params={"search": "222"}, headers=admin_headers).json()["data"]
    booked = client.get("/enquiries", params={"status": "BOOKED"}, headers=admin_headers).json()["data"]

    assert [e["name"] for e in by_phone["items"]] == ["Meera Shah"]
    assert [e["name"] for e in booked["items"]] == ["John Dsouza"]


def test_status_update_rejects_unknown_status(client, staff_headers):
    enquiry = create_enquiry(client, staff_headers)

    response = client.patch(f"/enquiries/{enquiry['id']}/status", json={"status": "MAYBE"}, headers=staff_headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "status"


def test_status_update_allows_any_transition_and_records_actor(client, admin, admin_headers, staff_headers):
    enquiry = create_enquiry(client, staff_headers)

    for status in ("NOT_INTERESTED", "BOOKED", "PENDING"):
        response = client.patch(
            f"/enquiries/{enquiry['id']}/status", json={"status": status}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == status

    assert response.json()["data"]["createdById"] == admin.id


def test_update_requires_at_least_one_field(client, staff_headers):
    enquiry = create_enquiry(client, staff_headers)

    response = client.put(f"/enquiries/{enquiry['id']}", json={}, headers=staff_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "No fields to update"


def test_partial_update(client, staff_headers):
    enquiry = create_enquiry(client, staff_headers)

    response = client.put(
        f"/enquiries/{enquiry['id']}", json={"purpose": "Honeymoon package for two"}, headers=staff_headers
    )

    data = response.json()["data"]
    assert data["purpose"] == "Honeymoon package for two"
    assert data["name"] == ENQUIRY["name"]


def test_stats(client, admin_headers):
    create_enquiry(client, admin_headers)
    create_enquiry(client, admin_headers, status="BOOKED")
    create_enquiry(client, admin_headers, status="NOT_INTERESTED")
    create_enquiry(client, admin_headers, status="NOT_INTERESTED")

    response = client.get("/enquiries/stats", headers=admin_headers)

    assert response.json()["data"] == {"total": 4, "pending": 1, "booked": 1, "notInterested": 2}


def test_only_admin_can_delete(client, admin_headers, staff_headers):
    enquiry = create_enquiry(client, staff_headers)

    assert client.delete(f"/enquiries/{enquiry['id']}", headers=staff_headers).status_code == 403
    assert client.delete(f"/enquiries/{enquiry['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/enquiries/{enquiry['id']}", headers=admin_headers).status_code == 404
