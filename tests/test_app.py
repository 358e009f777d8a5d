def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "TourDesk API is running"}


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/no-such-route")

    assert response.status_code == 404
    assert response.json() == {"success": False, "statusCode": 404, "message": "Not Found"}


def test_method_not_allowed_uses_error_envelope(client):
    response = client.patch("/health")

    assert response.status_code == 405
    assert response.json()["success"] is False
