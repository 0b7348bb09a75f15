from datetime import date, timedelta

from coliving_service.app.enum.coliving_enum import BookingStatus, PaymentStatus, PaymentType
from coliving_service.app.models.payments import Payment


def _payment(db, booking, status=PaymentStatus.PENDING.value, due_date=None, type=PaymentType.RENT.value):
    payment = Payment(booking_id=booking.id, user_id=booking.user_id, amount=520, type=type,
                      status=status, due_date=due_date or date.today())
    db.add(payment)
    db.commit()
    return payment


def test_overdue_payments_are_marked_late(client, admin_headers, make_user, make_room, make_booking, db):
    booking = make_booking(make_user(), make_room(), status=BookingStatus.ACTIVE.value)
    _payment(db, booking, due_date=date.today() - timedelta(days=3))
    _payment(db, booking, due_date=date.today() + timedelta(days=3))

    body = client.get("/api/payments", headers=admin_headers).json()

    statuses = sorted(p["status"] for p in body["data"])
    assert statuses == [PaymentStatus.LATE.value, PaymentStatus.PENDING.value]


def test_create_payment(client, admin_headers, make_user, make_room, make_booking):
    booking = make_booking(make_user(), make_room())

    response = client.post("/api/payments", headers=admin_headers, json={
        "bookingId": booking.id, "amount": 520, "type": "RENT", "dueDate": "2025-10-01"})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["userId"] == booking.user_id
    assert data["status"] == PaymentStatus.PENDING.value


def test_mark_paid_stamps_date(client, admin_headers, make_user, make_room, make_booking, db):
    booking = make_booking(make_user(), make_room())
    payment = _payment(db, booking)

    response = client.put("/api/payments", headers=admin_headers, json={"id": payment.id, "status": "PAID"})

    data = response.json()["data"]
    assert data["status"] == PaymentStatus.PAID.value
    assert data["paidDate"] == date.today().isoformat()


def test_payments_require_staff(client):
    assert client.get("/api/payments").status_code == 401
