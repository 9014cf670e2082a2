def test_create_and_list_services(client, auth_headers, create_service):
    created = create_service(auth_headers, name="Skin Fade", duration=45, price=35.0)

    assert created["name"] == "Skin Fade"
    assert created["duration"] == 45
    assert created["price"] == 35.0
    assert created["category"] == "General"
    assert created["isActive"] is True

    listed = client.get("/api/services", headers=auth_headers).json()
    assert [s["id"] for s in listed] == [created["id"]]


def test_service_validation(client, auth_headers):
    zero = client.post(
        "/api/services", json={"name": "Cut", "duration": 0, "price": 10}, headers=auth_headers
    )
    assert zero.status_code == 400

    negative = client.post(
        "/api/services", json={"name": "Cut", "duration": 30, "price": -1}, headers=auth_headers
    )
    assert negative.status_code == 400

    blank = client.post(
        "/api/services", json={"name": "   ", "duration": 30, "price": 10}, headers=auth_headers
    )
    assert blank.status_code == 400


def test_update_service_is_partial(client, auth_headers, create_service):
    service = create_service(auth_headers, name="Beard Trim", duration=15, price=12.0, category="Beard")

    response = client.patch(
        f"/api/services/{service['id']}", json={"price": 15.0}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["price"] == 15.0
    assert body["name"] == "Beard Trim"
    assert body["duration"] == 15
    assert body["category"] == "Beard"


def test_delete_service(client, auth_headers, create_service):
    service = create_service(auth_headers)

    response = client.delete(f"/api/services/{service['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Service removed"}

    missing = client.delete(f"/api/services/{service['id']}", headers=auth_headers)
    assert missing.status_code == 404
    assert missing.json() == {"message": "Service not found"}


def test_services_are_scoped_to_their_shop(client, auth_headers, other_headers, create_service):
    service = create_service(auth_headers)

    assert client.get("/api/services", headers=other_headers).json() == []
    assert (
        client.patch(f"/api/services/{service['id']}", json={"price": 1}, headers=other_headers).status_code
        == 404
    )
    assert client.delete(f"/api/services/{service['id']}", headers=other_headers).status_code == 404


def test_services_require_authentication(client):
    response = client.get("/api/services")

    assert response.status_code == 401
    assert response.json() == {"message": "Not authorized, no token"}
