import csv
from io import StringIO


def _create_client(client, headers, **data):
    payload = {"name": "Jordan Lee", "email": "jordan@mail.com", **data}
    response = client.post("/api/clients", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_client_defaults(client, auth_headers):
    created = _create_client(client, auth_headers, email="Jordan@Mail.com", phone="+1 (555) 123-4567")

    assert created["email"] == "jordan@mail.com"
    assert created["phone"] == "+15551234567"
    assert created["status"] == "active"
    assert created["totalBookings"] == 0
    assert created["totalSpent"] == 0.0
    assert created["lastVisit"] is None


def test_duplicate_email_within_shop_is_rejected(client, auth_headers, other_headers):
    _create_client(client, auth_headers)

    duplicate = client.post(
        "/api/clients", json={"name": "Someone", "email": "JORDAN@mail.com"}, headers=auth_headers
    )
    assert duplicate.status_code == 400
    assert duplicate.json() == {"message": "Client with this email already exists"}

    # Another shop may keep its own record for the same person
    _create_client(client, other_headers)


def test_invalid_client_fields(client, auth_headers):
    bad_phone = client.post(
        "/api/clients",
        json={"name": "Jordan", "email": "jordan@mail.com", "phone": "12"},
        headers=auth_headers,
    )
    assert bad_phone.status_code == 400

    bad_status = client.post(
        "/api/clients",
        json={"name": "Jordan", "email": "jordan@mail.com", "status": "vip"},
        headers=auth_headers,
    )
    assert bad_status.status_code == 400


def test_get_update_and_delete_client(client, auth_headers):
    created = _create_client(client, auth_headers)
    url = f"/api/clients/{created['id']}"

    assert client.get(url, headers=auth_headers).json()["name"] == "Jordan Lee"

    updated = client.put(url, json={"notes": "Prefers scissors", "status": "inactive"}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["notes"] == "Prefers scissors"
    assert updated.json()["status"] == "inactive"
    assert updated.json()["email"] == "jordan@mail.com"

    deleted = client.delete(url, headers=auth_headers)
    assert deleted.json() == {"message": "Client deleted successfully"}
    assert client.get(url, headers=auth_headers).status_code == 404


def test_update_to_taken_email_is_rejected(client, auth_headers):
    _create_client(client, auth_headers, email="first@mail.com")
    second = _create_client(client, auth_headers, name="Second", email="second@mail.com")

    response = client.put(
        f"/api/clients/{second['id']}", json={"email": "first@mail.com"}, headers=auth_headers
    )

    assert response.status_code == 400


def test_search_and_filter_clients(client, auth_headers):
    _create_client(client, auth_headers, name="Jordan Lee", email="jordan@mail.com")
    _create_client(client, auth_headers, name="Casey Moss", email="casey@mail.com", status="inactive")

    by_name = client.get("/api/clients", params={"search": "case"}, headers=auth_headers).json()
    assert [c["name"] for c in by_name] == ["Casey Moss"]

    active = client.get("/api/clients", params={"status": "active"}, headers=auth_headers).json()
    assert [c["name"] for c in active] == ["Jordan Lee"]

    everyone = client.get("/api/clients", headers=auth_headers).json()
    assert len(everyone) == 2


def test_clients_are_scoped_to_their_shop(client, auth_headers, other_headers):
    created = _create_client(client, auth_headers)

    assert client.get("/api/clients", headers=other_headers).json() == []
    assert client.get(f"/api/clients/{created['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/clients/{created['id']}", headers=other_headers).status_code == 404


def test_export_clients_csv(client, auth_headers):
    _create_client(client, auth_headers, name="Jordan Lee", email="jordan@mail.com", notes="Regular")

    response = client.get("/api/clients/export", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=clients_export_" in response.headers["content-disposition"]

    rows = list(csv.reader(StringIO(response.text)))
    assert rows[0][:3] == ["ID", "Name", "Email"]
    assert rows[1][1:3] == ["Jordan Lee", "jordan@mail.com"]
    assert rows[1][6] == "0.00"
    assert len(rows) == 2
