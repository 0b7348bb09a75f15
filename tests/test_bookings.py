from datetime import date

from coliving_service.app.crud.bookings_crud import compute_booking_stats, compute_total_amount, months_between
from coliving_service.app.enum.coliving_enum import BookingStatus, PaymentStatus, PaymentType, RoomStatus
from coliving_service.app.models.bookings import Booking
from coliving_service.app.models.payments import Payment
from coliving_service.app.models.rooms import Room
from shared.models.users import User
from shared.utils.enums import UserRole


def _payload(user, room, **overrides):
    payload = {
        "userId": user.id,
        "roomId": room.id,
        "startDate": "2025-01-01",
        "endDate": None,
        "monthlyRent": 520,
        "securityDeposit": 520,
    }
    payload.update(overrides)
    return payload


def test_months_between():
    assert months_between(date(2025, 1, 1), None) == 1
    assert months_between(date(2025, 1, 1), date(2025, 1, 1)) == 1
    assert months_between(date(2025, 1, 1), date(2025, 1, 31)) == 1
    assert months_between(date(2025, 1, 1), date(2025, 3, 2)) == 2
    assert months_between(date(2025, 1, 1), date(2025, 3, 3)) == 3


def test_total_amount_open_ended_is_one_month_plus_deposit():
    assert compute_total_amount(520, 520, date(2025, 1, 1), None) == 1040


def test_booking_stats():
    payments = [
        Payment(amount=520, status=PaymentStatus.PAID.value, due_date=date(2025, 1, 1)),
        Payment(amount=520, status=PaymentStatus.PENDING.value, due_date=date(2025, 2, 1)),
        Payment(amount=100, status=PaymentStatus.CANCELLED.value, due_date=date(2025, 2, 1)),
    ]

    stats = compute_booking_stats(payments, today=date(2025, 3, 1))

    assert stats.total_paid == 520
    assert stats.total_due == 1040
    assert stats.balance == 520
    assert stats.overdue_payments == 1
    assert stats.completion_rate == 50


def test_create_booking_creates_deposit_payment(client, admin_headers, make_user, make_room, db):
    user, room = make_user(), make_room()

    response = client.post("/api/booking", json=_payload(user, room), headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Réservation créée avec succès"
    data = body["data"]
    assert data["status"] == BookingStatus.PENDING.value
    assert data["totalAmount"] == 1040
    assert len(data["payments"]) == 1
    assert data["payments"][0]["type"] == PaymentType.SECURITY_DEPOSIT.value
    assert data["payments"][0]["status"] == PaymentStatus.PENDING.value
    assert data["payments"][0]["dueDate"] == "2025-01-01"
    assert data["stats"]["totalDue"] == 520


def test_create_booking_with_end_date(client, admin_headers, make_user, make_room):
    user, room = make_user(), make_room()

    response = client.post("/api/booking", headers=admin_headers, json=_payload(
        user, room, endDate="2025-03-02", securityDeposit=0))

    data = response.json()["data"]
    assert data["totalAmount"] == 1040
    assert data["payments"] == []


def test_booking_on_occupied_room_rejected_without_payment(client, admin_headers, make_user, make_room, db):
    user = make_user()
    room = make_room(status=RoomStatus.OCCUPIED.value)

    response = client.post("/api/booking", json=_payload(user, room), headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Chambre non disponible"
    assert db.query(Booking).count() == 0
    assert db.query(Payment).count() == 0


def test_booking_overlapping_confirmed_booking_rejected(client, admin_headers, make_user, make_room, make_booking):
    room = make_room()
    make_booking(make_user(), room, status=BookingStatus.CONFIRMED.value,
                 start_date=date(2025, 1, 1), end_date=date(2025, 6, 30))

    response = client.post("/api/booking", headers=admin_headers, json=_payload(
        make_user(), room, startDate="2025-03-01", endDate="2025-09-01"))

    assert response.status_code == 400
    assert response.json()["error"] == "Chambre déjà réservée pour cette période"


def test_open_ended_booking_blocks_later_periods(client, admin_headers, make_user, make_room, make_booking):
    room = make_room()
    make_booking(make_user(), room, status=BookingStatus.CONFIRMED.value, start_date=date(2025, 1, 1))

    response = client.post("/api/booking", headers=admin_headers, json=_payload(
        make_user(), room, startDate="2026-01-01", endDate="2026-06-01"))

    assert response.status_code == 400


def test_open_ended_request_overlaps_far_future_booking(client, admin_headers, make_user, make_room, make_booking):
    room = make_room()
    make_booking(make_user(), room, status=BookingStatus.CONFIRMED.value,
                 start_date=date(2031, 6, 1), end_date=date(2031, 12, 1))

    response = client.post("/api/booking", headers=admin_headers, json=_payload(
        make_user(), room, startDate="2031-01-01", endDate=None))

    assert response.status_code == 400
    assert response.json()["error"] == "Chambre déjà réservée pour cette période"


def test_bounded_request_before_far_future_booking_is_free(client, admin_headers, make_user, make_room, make_booking):
    room = make_room()
    make_booking(make_user(), room, status=BookingStatus.CONFIRMED.value,
                 start_date=date(2031, 6, 1), end_date=date(2031, 12, 1))

    response = client.post("/api/booking", headers=admin_headers, json=_payload(
        make_user(), room, startDate="2031-01-01", endDate="2031-05-31"))

    assert response.status_code == 201


def test_booking_unknown_user(client, admin_headers, make_room):
    room = make_room()

    response = client.post("/api/booking", headers=admin_headers, json={
        "userId": "nobody", "roomId": room.id, "startDate": "2025-01-01", "monthlyRent": 500})

    assert response.status_code == 404
    assert response.json()["error"] == "Utilisateur non trouvé"


def test_end_date_before_start_date_is_invalid(client, admin_headers, make_user, make_room):
    response = client.post("/api/booking", headers=admin_headers, json=_payload(
        make_user(), make_room(), startDate="2025-05-01", endDate="2025-04-01"))

    assert response.status_code == 400
    assert response.json()["error"] == "Données invalides"


def test_bulk_cancel_frees_rooms_without_other_blocking_bookings(
        client, admin_headers, make_user, make_room, make_booking, db):
    shared_room = make_room(number=1, status=RoomStatus.OCCUPIED.value)
    single_room = make_room(number=2, status=RoomStatus.OCCUPIED.value)
    cancelled_a = make_booking(make_user(), shared_room, status=BookingStatus.ACTIVE.value)
    make_booking(make_user(), shared_room, status=BookingStatus.ACTIVE.value, start_date=date(2025, 2, 1))
    cancelled_b = make_booking(make_user(), single_room, status=BookingStatus.ACTIVE.value)

    response = client.put("/api/booking", headers=admin_headers, json={
        "action": "bulk_status", "bookingIds": [cancelled_a.id, cancelled_b.id], "status": "CANCELLED"})

    assert response.status_code == 200
    assert response.json()["data"]["count"] == 2
    db.expire_all()
    assert db.get(Room, shared_room.id).status == RoomStatus.OCCUPIED.value
    assert db.get(Room, single_room.id).status == RoomStatus.AVAILABLE.value


def test_bulk_activate_occupies_room(client, admin_headers, make_user, make_room, make_booking, db):
    room = make_room()
    booking = make_booking(make_user(), room, status=BookingStatus.CONFIRMED.value)

    client.put("/api/booking", headers=admin_headers, json={
        "action": "bulk_status", "bookingIds": [booking.id], "status": "ACTIVE"})

    db.expire_all()
    assert db.get(Room, room.id).status == RoomStatus.OCCUPIED.value


def test_bulk_status_rejects_unknown_status(client, admin_headers, make_user, make_room, make_booking):
    booking = make_booking(make_user(), make_room())

    response = client.put("/api/booking", headers=admin_headers, json={
        "action": "bulk_status", "bookingIds": [booking.id], "status": "LOST"})

    assert response.status_code == 400
    assert response.json()["error"] == "Statut invalide"


def test_delete_with_active_booking_deletes_nothing(client, admin_headers, make_user, make_room, make_booking, db):
    room = make_room()
    cancelled = make_booking(make_user(), room, status=BookingStatus.CANCELLED.value)
    active = make_booking(make_user(), room, status=BookingStatus.ACTIVE.value)

    response = client.delete("/api/booking", params={"ids": f"{cancelled.id},{active.id}"}, headers=admin_headers)

    assert response.status_code == 400
    assert db.query(Booking).count() == 2


def test_delete_closed_bookings_removes_payments(client, admin_headers, make_user, make_room, make_booking, db):
    user = make_user()
    booking = make_booking(user, make_room(), status=BookingStatus.ENDED.value)
    db.add(Payment(booking_id=booking.id, user_id=user.id, amount=520, type=PaymentType.RENT.value,
                   status=PaymentStatus.PAID.value, due_date=date(2025, 1, 1)))
    db.commit()

    response = client.delete("/api/booking", params={"ids": booking.id}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "1 réservation(s) supprimée(s)"
    assert db.query(Booking).count() == 0
    assert db.query(Payment).count() == 0


def test_delete_without_ids(client, admin_headers):
    response = client.delete("/api/booking", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Aucun ID de réservation fourni"


def test_update_booking_status_syncs_room(client, admin_headers, make_user, make_room, make_booking, db):
    room = make_room(status=RoomStatus.OCCUPIED.value)
    booking = make_booking(make_user(), room, status=BookingStatus.ACTIVE.value)

    response = client.put(f"/api/booking/{booking.id}", json={"status": "ENDED"}, headers=admin_headers)

    assert response.json()["data"]["status"] == BookingStatus.ENDED.value
    db.expire_all()
    assert db.get(Room, room.id).status == RoomStatus.AVAILABLE.value


def test_list_bookings_filtered_by_status(client, admin_headers, make_user, make_room, make_booking):
    room = make_room()
    make_booking(make_user(), room, status=BookingStatus.PENDING.value)
    make_booking(make_user(), room, status=BookingStatus.CANCELLED.value)

    body = client.get("/api/booking", params={"status": "pending"}, headers=admin_headers).json()

    assert [b["status"] for b in body["data"]] == [BookingStatus.PENDING.value]
    assert body["pagination"]["total"] == 1


def test_public_reservation_creates_prospect(client, make_room, db):
    room = make_room(price=600)

    response = client.post("/api/reservations", json={
        "firstName": "Lucie",
        "lastName": "Martin",
        "email": "Lucie.Martin@example.com",
        "roomId": room.id,
        "startDate": "2025-09-01",
    })

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["monthlyRent"] == 600
    assert data["securityDeposit"] == 600
    assert data["totalAmount"] == 1200
    user = db.query(User).filter(User.email == "lucie.martin@example.com").one()
    assert user.role == UserRole.PROSPECT.value


def test_public_reservation_reuses_existing_user(client, make_user, make_room, db):
    existing = make_user(email="known@example.com")
    room = make_room()

    response = client.post("/api/reservations", json={
        "firstName": "Known", "lastName": "User", "email": "KNOWN@example.com",
        "roomId": room.id, "startDate": "2025-09-01"})

    assert response.status_code == 201
    assert response.json()["data"]["userId"] == existing.id
    assert db.query(User).count() == 1
