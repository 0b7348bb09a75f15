from datetime import date

from shared.core.auth import create_user_token
from shared.utils.enums import UserRole
from coliving_service.app.enum.coliving_enum import BookingStatus
from coliving_service.app.models.contract_templates import ContractTemplate


def _create(client, headers, name, is_default=False, body="Bonjour {{TENANT_FIRSTNAME}}"):
    response = client.post("/api/contract-templates", headers=headers, json={
        "name": name, "isDefault": is_default, "pdfData": body})
    assert response.status_code == 201
    return response.json()["data"]


def test_templates_require_admin(client, make_user):
    manager = make_user(role=UserRole.MANAGER.value)

    response = client.get("/api/contract-templates",
                          headers={"Authorization": f"Bearer {create_user_token(manager)}"})

    assert response.status_code == 403


def test_single_default_template(client, admin_headers, db):
    first = _create(client, admin_headers, "Bail A", is_default=True)
    second = _create(client, admin_headers, "Bail B", is_default=True)

    defaults = db.query(ContractTemplate).filter(ContractTemplate.is_default.is_(True)).all()
    assert [t.id for t in defaults] == [second["id"]]

    client.post(f"/api/contract-templates/{first['id']}/set-default", headers=admin_headers)

    db.expire_all()
    defaults = db.query(ContractTemplate).filter(ContractTemplate.is_default.is_(True)).all()
    assert [t.id for t in defaults] == [first["id"]]


def test_list_templates_newest_first(client, admin_headers):
    _create(client, admin_headers, "Bail A")
    _create(client, admin_headers, "Bail B")

    body = client.get("/api/contract-templates", headers=admin_headers).json()

    assert {t["name"] for t in body["data"]} == {"Bail A", "Bail B"}
    assert body["data"][0]["createdBy"]["email"] == "admin@example.com"


def test_update_template(client, admin_headers):
    template = _create(client, admin_headers, "Bail A")

    response = client.put(f"/api/contract-templates/{template['id']}", headers=admin_headers,
                          json={"name": "Bail meublé"})

    assert response.json()["data"]["name"] == "Bail meublé"
    assert response.json()["data"]["pdfData"] == "Bonjour {{TENANT_FIRSTNAME}}"


def test_update_can_clear_description(client, admin_headers):
    created = client.post("/api/contract-templates", headers=admin_headers, json={
        "name": "Bail A", "description": "Version 2025", "pdfData": "Bonjour {{TENANT_FIRSTNAME}}"}).json()["data"]

    response = client.put(f"/api/contract-templates/{created['id']}", headers=admin_headers,
                          json={"description": None, "name": None})

    data = response.json()["data"]
    assert data["description"] is None
    assert data["name"] == "Bail A"


def test_cannot_delete_default_while_others_exist(client, admin_headers):
    default = _create(client, admin_headers, "Bail A", is_default=True)
    other = _create(client, admin_headers, "Bail B")

    refused = client.delete(f"/api/contract-templates/{default['id']}", headers=admin_headers)
    allowed = client.delete(f"/api/contract-templates/{other['id']}", headers=admin_headers)

    assert refused.status_code == 400
    assert allowed.status_code == 200


def test_unknown_template_is_404(client, admin_headers):
    response = client.get("/api/contract-templates/missing", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Template introuvable"


def test_variables_grouped_by_category(client, admin_headers):
    body = client.get("/api/contract-templates/variables", headers=admin_headers).json()

    tenant_keys = [v["key"] for v in body["data"]["Locataire"]]
    assert "TENANT_FIRSTNAME" in tenant_keys
    assert body["data"]["Financier"][0]["token"] == "{{MONTHLY_RENT}}"


def test_preview_with_context(client, admin_headers):
    response = client.post("/api/contract-templates/preview", headers=admin_headers, json={
        "pdfData": "<p>Bonjour {{TENANT_FIRSTNAME}}, loyer {{MONTHLY_RENT}}€ {{FAVORITE_COLOR}}</p>",
        "context": {"TENANT_FIRSTNAME": "Marie"}})

    data = response.json()["data"]
    assert data["content"] == "Bonjour Marie, loyer {{MONTHLY_RENT}}€ {{FAVORITE_COLOR}}"
    assert data["unresolvedTokens"] == ["MONTHLY_RENT", "FAVORITE_COLOR"]
    assert data["unknownTokens"] == ["FAVORITE_COLOR"]


def test_preview_with_booking(client, admin_headers, make_user, make_room, make_booking):
    booking = make_booking(make_user(first_name="Marie"), make_room(), status=BookingStatus.CONFIRMED.value,
                           start_date=date(2025, 9, 1), monthly_rent=520)

    response = client.post("/api/contract-templates/preview", headers=admin_headers, json={
        "pdfData": "Bonjour {{TENANT_FIRSTNAME}}, loyer {{MONTHLY_RENT}}€ dès le {{START_DATE}}",
        "bookingId": booking.id})

    assert response.json()["data"]["content"] == "Bonjour Marie, loyer 520€ dès le 01/09/2025"


def test_preview_requires_a_source(client, admin_headers):
    response = client.post("/api/contract-templates/preview", headers=admin_headers, json={})

    assert response.status_code == 400
