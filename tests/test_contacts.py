from coliving_service.app.enum.coliving_enum import ContactStatus
from coliving_service.app.models.contacts import Contact

CONTACT_PAYLOAD = {
    "firstName": "Jean",
    "lastName": "Petit",
    "email": "jean@example.com",
    "subject": "Visite",
    "message": "Bonjour, je souhaite visiter la colocation.",
    "type": "VISIT_REQUEST",
}


def test_public_contact_form(client):
    response = client.post("/api/contact", json=CONTACT_PAYLOAD)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == ContactStatus.NEW.value
    assert data["isRead"] is False


def test_contact_message_too_short(client):
    response = client.post("/api/contact", json={**CONTACT_PAYLOAD, "message": "Salut"})

    assert response.status_code == 400
    assert response.json()["issues"][0]["path"] == ["message"]


def test_blank_optional_fields_become_null(client):
    response = client.post("/api/contact", json={**CONTACT_PAYLOAD, "phone": "   "})

    assert response.json()["data"]["phone"] is None


def test_inbox_requires_staff(client):
    assert client.get("/api/contact").status_code == 401


def test_inbox_filters(client, admin_headers):
    client.post("/api/contact", json=CONTACT_PAYLOAD)
    client.post("/api/contact", json={**CONTACT_PAYLOAD, "email": "autre@example.com"})

    body = client.get("/api/contact", params={"email": "autre@example.com"}, headers=admin_headers).json()

    assert [c["email"] for c in body["data"]] == ["autre@example.com"]
    assert body["pagination"]["limit"] == 50


def test_respond_to_contact(client, admin_user, admin_headers):
    contact = client.post("/api/contact", json=CONTACT_PAYLOAD).json()["data"]

    response = client.patch("/api/contact", params={"id": contact["id"]}, headers=admin_headers,
                            json={"adminResponse": "Avec plaisir, samedi 10h ?"})

    data = response.json()["data"]
    assert data["status"] == ContactStatus.RESOLVED.value
    assert data["isRead"] is True
    assert data["respondedBy"] == admin_user.id
    assert data["respondedAt"] is not None


def test_delete_contact(client, admin_headers, db):
    contact = client.post("/api/contact", json=CONTACT_PAYLOAD).json()["data"]

    response = client.delete("/api/contact", params={"id": contact["id"]}, headers=admin_headers)

    assert response.status_code == 200
    assert db.query(Contact).count() == 0
