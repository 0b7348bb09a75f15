from shared.core.auth import create_user_token
from shared.models.users import User
from shared.utils.enums import UserRole, UserStatus
from coliving_service.app.enum.coliving_enum import BookingStatus
from conftest import ADMIN_PASSWORD


def test_login(client, admin_user):
    response = client.post("/api/auth/login", json={"email": "ADMIN@example.com", "password": ADMIN_PASSWORD})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tokenType"] == "bearer"
    assert data["user"]["email"] == "admin@example.com"
    assert "password" not in data["user"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert me.json()["data"]["role"] == UserRole.ADMIN.value


def test_login_wrong_password(client, admin_user):
    response = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_login_refused_for_resident(client, make_user):
    make_user(email="resident@example.com", password="Resident-password-1")

    response = client.post("/api/auth/login", json={"email": "resident@example.com", "password": "Resident-password-1"})

    assert response.status_code == 403


def test_invalid_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["error"] == "Token invalide ou expiré"


def test_inactive_account_is_refused(client, make_user):
    user = make_user(role=UserRole.ADMIN.value, status=UserStatus.INACTIVE.value)

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {create_user_token(user)}"})

    assert response.status_code == 403


def test_change_password(client, admin_user, admin_headers):
    wrong = client.post("/api/auth/change-password", headers=admin_headers,
                        json={"currentPassword": "nope", "newPassword": "Another-password-2"})
    right = client.post("/api/auth/change-password", headers=admin_headers,
                        json={"currentPassword": ADMIN_PASSWORD, "newPassword": "Another-password-2"})
    login = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "Another-password-2"})

    assert wrong.status_code == 400
    assert right.status_code == 200
    assert login.status_code == 200


def test_create_manager_gets_temporary_password(client, admin_headers, db):
    response = client.post("/api/users", headers=admin_headers, json={
        "email": "Gestion@Example.com", "firstName": "Paul", "lastName": "Durand", "role": "MANAGER"})

    assert response.status_code == 201
    assert response.json()["data"]["email"] == "gestion@example.com"
    user = db.query(User).filter(User.email == "gestion@example.com").one()
    assert user.password is not None


def test_create_prospect_has_no_password(client, admin_headers, db):
    client.post("/api/users", headers=admin_headers, json={
        "email": "prospect@example.com", "firstName": "Léa", "lastName": "Morel"})

    user = db.query(User).filter(User.email == "prospect@example.com").one()
    assert user.role == UserRole.PROSPECT.value
    assert user.password is None


def test_duplicate_email(client, admin_headers, make_user):
    make_user(email="marie@example.com")

    response = client.post("/api/users", headers=admin_headers, json={
        "email": "MARIE@example.com", "firstName": "Marie", "lastName": "Bis"})

    assert response.status_code == 400
    assert response.json()["error"] == "Un utilisateur avec cet email existe déjà"


def test_list_users_with_booking_counts(client, admin_headers, make_user, make_room, make_booking):
    tenant = make_user(email="tenant@example.com")
    make_booking(tenant, make_room())

    body = client.get("/api/users", params={"role": "RESIDENT"}, headers=admin_headers).json()

    assert [(u["email"], u["bookingsCount"]) for u in body["data"]] == [("tenant@example.com", 1)]


def test_cannot_deactivate_user_with_active_booking(client, admin_headers, make_user, make_room, make_booking):
    tenant = make_user()
    make_booking(tenant, make_room(), status=BookingStatus.ACTIVE.value)

    response = client.put(f"/api/users/{tenant.id}", json={"status": "INACTIVE"}, headers=admin_headers)

    assert response.status_code == 400


def test_cannot_demote_last_admin(client, admin_user, admin_headers):
    response = client.put(f"/api/users/{admin_user.id}", json={"role": "MANAGER"}, headers=admin_headers)

    assert response.status_code == 400


def test_delete_user(client, admin_headers, make_user, make_room, make_booking, db):
    tenant = make_user()
    make_booking(tenant, make_room(), status=BookingStatus.CANCELLED.value)

    response = client.delete(f"/api/users/{tenant.id}", headers=admin_headers)

    assert response.status_code == 200
    assert db.query(User).filter(User.id == tenant.id).count() == 0


def test_cannot_delete_user_with_pending_booking(client, admin_headers, make_user, make_room, make_booking):
    tenant = make_user()
    make_booking(tenant, make_room(), status=BookingStatus.PENDING.value)

    response = client.delete(f"/api/users/{tenant.id}", headers=admin_headers)

    assert response.status_code == 400


def test_users_require_admin(client, make_user):
    manager = make_user(role=UserRole.MANAGER.value)

    response = client.get("/api/users", headers={"Authorization": f"Bearer {create_user_token(manager)}"})

    assert response.status_code == 403
