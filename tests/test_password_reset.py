from urllib.parse import parse_qs, urlparse

import pytest

from shared.utils.enums import UserRole, UserStatus
from coliving_service.app.crud import auth_crud
from coliving_service.app.services.password_reset_tokens import create_reset_token
from coliving_service.app.services.signing_tokens import create_signing_token
from conftest import ADMIN_PASSWORD

NEW_PASSWORD = "Nouveau-mot-de-passe-1"


class RecordingEmailHelper:
    sent = []

    def send_email(self, recipients, subject, html_body, attachments=None):
        RecordingEmailHelper.sent.append({"recipients": recipients, "subject": subject, "html": html_body})
        return True


@pytest.fixture
def outbox(monkeypatch):
    RecordingEmailHelper.sent = []
    monkeypatch.setattr(auth_crud, "EmailHelper", RecordingEmailHelper)
    return RecordingEmailHelper.sent


def _token_from(email):
    href = email["html"].split('href="', 1)[1].split('"', 1)[0]
    return parse_qs(urlparse(href.replace("&amp;", "&")).query)["token"][0]


def _reset_token(user):
    return create_reset_token(user.id, user.email, user.password)


def test_forgot_password_emails_reset_link(client, admin_user, outbox):
    response = client.post("/api/auth/forgot-password", json={"email": "ADMIN@example.com"})

    assert response.status_code == 200
    assert response.json()["message"] == "Si un compte existe, vous recevrez un email"
    assert len(outbox) == 1
    assert outbox[0]["recipients"] == ["admin@example.com"]
    assert "http://testserver/auth/reset-password?token=" in outbox[0]["html"]


@pytest.mark.parametrize("email", ["nobody@example.com", "resident@example.com"])
def test_forgot_password_does_not_reveal_accounts(client, make_user, outbox, email):
    make_user(email="resident@example.com", password="Resident-password-1")

    response = client.post("/api/auth/forgot-password", json={"email": email})

    assert response.status_code == 200
    assert response.json()["message"] == "Si un compte existe, vous recevrez un email"
    assert outbox == []


def test_verify_reset_token(client, admin_user):
    response = client.get("/api/auth/verify-reset-token", params={"token": _reset_token(admin_user)})

    assert response.status_code == 200
    assert response.json()["data"] == {"valid": True, "email": "admin@example.com"}


def test_reset_password_then_login(client, admin_user, outbox):
    client.post("/api/auth/forgot-password", json={"email": "admin@example.com"})
    token = _token_from(outbox[0])

    response = client.post("/api/auth/reset-password", json={"token": token, "password": NEW_PASSWORD})

    assert response.status_code == 200
    old = client.post("/api/auth/login", json={"email": "admin@example.com", "password": ADMIN_PASSWORD})
    new = client.post("/api/auth/login", json={"email": "admin@example.com", "password": NEW_PASSWORD})
    assert old.status_code == 401
    assert new.status_code == 200


def test_reset_link_is_single_use(client, admin_user):
    token = _reset_token(admin_user)
    client.post("/api/auth/reset-password", json={"token": token, "password": NEW_PASSWORD})

    again = client.post("/api/auth/reset-password", json={"token": token, "password": "Encore-un-autre-1"})
    verify = client.get("/api/auth/verify-reset-token", params={"token": token})

    assert again.status_code == 400
    assert again.json()["error"] == "Token invalide ou expiré"
    assert verify.status_code == 400


def test_expired_reset_token(client, admin_user):
    token = create_reset_token(admin_user.id, admin_user.email, admin_user.password, expire_minutes=-1)

    response = client.post("/api/auth/reset-password", json={"token": token, "password": NEW_PASSWORD})

    assert response.status_code == 400


def test_other_tokens_are_not_reset_tokens(client, admin_user, admin_headers):
    access_token = admin_headers["Authorization"].split(" ", 1)[1]
    signing_token = create_signing_token("contract-id", admin_user.email, "Admin")

    for token in (access_token, signing_token, "not-a-jwt"):
        response = client.post("/api/auth/reset-password", json={"token": token, "password": NEW_PASSWORD})
        assert response.status_code == 400


def test_reset_token_is_not_an_access_token(client, admin_user):
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {_reset_token(admin_user)}"})

    assert response.status_code == 401


def test_reset_refused_for_inactive_account(client, make_user, db):
    manager = make_user(email="manager@example.com", role=UserRole.MANAGER.value, password="Manager-password-1")
    token = _reset_token(manager)
    manager.status = UserStatus.SUSPENDED.value
    db.commit()

    response = client.post("/api/auth/reset-password", json={"token": token, "password": NEW_PASSWORD})

    assert response.status_code == 400


def test_reset_password_too_short(client, admin_user):
    response = client.post("/api/auth/reset-password", json={"token": _reset_token(admin_user), "password": "court"})

    assert response.status_code == 400
    assert response.json()["error"] == "Données invalides"
