from coliving_service.app.models.admin_signatures import AdminSignature
from conftest import PNG_DATA_URL


def _create(client, headers, name, is_default=False):
    response = client.post("/api/admin-signatures", headers=headers, json={
        "name": name, "signatureData": PNG_DATA_URL, "isDefault": is_default})
    assert response.status_code == 201
    return response.json()["data"]


def test_signature_must_be_an_image(client, admin_headers):
    response = client.post("/api/admin-signatures", headers=admin_headers, json={
        "name": "Gérant", "signatureData": "data:application/pdf;base64,AAAA"})

    assert response.status_code == 400
    assert response.json()["error"] == "Données invalides"


def test_single_default_signature(client, admin_headers, db):
    first = _create(client, admin_headers, "Gérant", is_default=True)
    second = _create(client, admin_headers, "Directrice", is_default=True)

    defaults = db.query(AdminSignature).filter(AdminSignature.is_default.is_(True)).all()
    assert [s.id for s in defaults] == [second["id"]]

    client.put(f"/api/admin-signatures/{first['id']}", json={"isDefault": True}, headers=admin_headers)

    db.expire_all()
    defaults = db.query(AdminSignature).filter(AdminSignature.is_default.is_(True)).all()
    assert [s.id for s in defaults] == [first["id"]]


def test_list_and_delete(client, admin_headers):
    signature = _create(client, admin_headers, "Gérant")

    listed = client.get("/api/admin-signatures", headers=admin_headers).json()
    deleted = client.delete("/api/admin-signatures", params={"id": signature["id"]}, headers=admin_headers)
    after = client.get("/api/admin-signatures", headers=admin_headers).json()

    assert [s["name"] for s in listed["data"]] == ["Gérant"]
    assert deleted.status_code == 200
    assert after["data"] == []
