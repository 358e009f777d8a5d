from conftest import create_booking, create_member, create_package

from tourdesk.config import UPLOAD_DIR


def jpeg(name="cover.jpg", content=b"\xff\xd8\xff jpeg"):
    return {"coverPhoto": (name, content, "image/jpeg")}


def test_create_package_with_cover_photo(client, staff, staff_headers):
    package = create_package(client, staff_headers, files=jpeg())

    assert package["packageName"] == "Kashmir Delight"
    assert package["tourPrice"] == 25000
    assert package["totalSeat"] == 40
    assert package["createdById"] == staff.id
    assert package["coverPhoto"].startswith(f"tourpackage/{package['id']}/coverPhoto-")
    assert (UPLOAD_DIR / package["coverPhoto"]).is_file()


def test_create_package_validation(client, staff_headers):
    response = client.post(
        "/tour-packages",
        data={"packageName": "K", "tourPrice": "0", "totalSeat": "2.5", "desc": "too short"},
        headers=staff_headers,
    )

    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"packageName", "tourPrice", "totalSeat", "desc"}


def test_list_packages_filters_and_sorting(client, staff_headers):
    create_package(client, staff_headers, name="Goa Beaches", price=12000, seats=30)
    create_package(client, staff_headers, name="Kerala Backwaters", price=18000, seats=20)
    create_package(client, staff_headers, name="Ladakh Ride", price=32000, seats=12)

    response = client.get(
        "/tour-packages",
        params={"minPrice": 15000, "sortBy": "tourPrice", "sortOrder": "asc"},
        headers=staff_headers,
    )
    names = [p["packageName"] for p in response.json()["data"]["items"]]
    assert names == ["Kerala Backwaters", "Ladakh Ride"]

    response = client.get("/tour-packages", params={"search": "goa"}, headers=staff_headers)
    assert [p["packageName"] for p in response.json()["data"]["items"]] == ["Goa Beaches"]

    response = client.get("/tour-packages", params={"maxSeats": 25, "sortBy": "totalSeat"}, headers=staff_headers)
    assert [p["totalSeat"] for p in response.json()["data"]["items"]] == [20, 12]


def test_list_packages_rejects_unknown_sort_field(client, staff_headers):
    response = client.get("/tour-packages", params={"sortBy": "desc"}, headers=staff_headers)

    assert response.status_code == 400


def test_package_stats(client, staff_headers):
    goa = create_package(client, staff_headers, name="Goa Beaches", price=10000, seats=30)
    create_package(client, staff_headers, name="Ladakh Ride", price=30000, seats=10)
    member = create_member(client, staff_headers)
    create_booking(client, staff_headers, [member["id"]], goa["id"])

    response = client.get("/tour-packages/stats", headers=staff_headers)

    assert response.json()["data"] == {
        "totalPackages": 2,
        "totalSeats": 40,
        "averagePrice": 20000,
        "minPrice": 10000,
        "maxPrice": 30000,
        "bookedPackages": 1,
    }


def test_update_package_replaces_cover_photo(client, staff_headers):
    package = create_package(client, staff_headers, files=jpeg())
    old_cover = UPLOAD_DIR / package["coverPhoto"]

    response = client.put(
        f"/tour-packages/{package['id']}",
        data={"tourPrice": "27500"},
        files=jpeg("new.png", b"png"),
        headers=staff_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tourPrice"] == 27500
    assert data["packageName"] == "Kashmir Delight"
    assert data["coverPhoto"].endswith(".png")
    assert not old_cover.exists()
    assert (UPLOAD_DIR / data["coverPhoto"]).is_file()


def test_download_cover_photo_uses_package_name(client, staff_headers):
    package = create_package(client, staff_headers, files=jpeg(content=b"cover-bytes"))

    response = client.get(f"/tour-packages/{package['id']}/cover-photo", headers=staff_headers)

    assert response.status_code == 200
    assert response.content == b"cover-bytes"
    assert "Kashmir Delight-cover.jpg" in response.headers["content-disposition"]


def test_cover_photo_missing(client, staff_headers):
    package = create_package(client, staff_headers)

    response = client.get(f"/tour-packages/{package['id']}/cover-photo", headers=staff_headers)

    assert response.status_code == 404


def test_delete_package_with_bookings_conflicts(client, staff_headers):
    package = create_package(client, staff_headers)
    member = create_member(client, staff_headers)
    create_booking(client, staff_headers, [member["id"]], package["id"])

    response = client.delete(f"/tour-packages/{package['id']}", headers=staff_headers)

    assert response.status_code == 409
    assert client.get(f"/tour-packages/{package['id']}", headers=staff_headers).status_code == 200


def test_delete_package_removes_cover(client, staff_headers):
    package = create_package(client, staff_headers, files=jpeg())

    response = client.delete(f"/tour-packages/{package['id']}", headers=staff_headers)

    assert response.status_code == 200
    assert not (UPLOAD_DIR / "tourpackage" / package["id"]).exists()
    assert client.get(f"/tour-packages/{package['id']}", headers=staff_headers).status_code == 404


def test_bulk_delete_packages(client, staff_headers):
    free = create_package(client, staff_headers, name="Goa Beaches")
    booked = create_package(client, staff_headers, name="Ladakh Ride")
    member = create_member(client, staff_headers)
    create_booking(client, staff_headers, [member["id"]], booked["id"])

    response = client.post(
        "/tour-packages/bulk-delete",
        json={"packageIds": [free["id"], booked["id"], "missing"]},
        headers=staff_headers,
    )

    assert response.json()["data"] == {"deletedCount": 1, "failedIds": [booked["id"], "missing"]}
