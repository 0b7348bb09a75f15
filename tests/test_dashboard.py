from datetime import date, timedelta

from coliving_service.app.enum.coliving_enum import BookingStatus, PaymentStatus, PaymentType, RoomStatus
from coliving_service.app.models.contacts import Contact
from coliving_service.app.models.payments import Payment


def test_dashboard(client, admin_headers, make_user, make_room, make_booking, db):
    occupied = make_room(number=1, status=RoomStatus.OCCUPIED.value)
    make_room(number=2)
    tenant = make_user()
    booking = make_booking(tenant, occupied, status=BookingStatus.ACTIVE.value)
    today = date.today()
    db.add_all([
        Payment(booking_id=booking.id, user_id=tenant.id, amount=520, type=PaymentType.RENT.value,
                status=PaymentStatus.PAID.value, due_date=today, paid_date=today),
        Payment(booking_id=booking.id, user_id=tenant.id, amount=300, type=PaymentType.SECURITY_DEPOSIT.value,
                status=PaymentStatus.PAID.value, due_date=today, paid_date=today),
        Payment(booking_id=booking.id, user_id=tenant.id, amount=520, type=PaymentType.RENT.value,
                status=PaymentStatus.PENDING.value, due_date=today + timedelta(days=3)),
        Contact(first_name="Jean", last_name="Petit", email="jean@example.com", subject="Visite",
                message="Je souhaite visiter."),
    ])
    db.commit()

    response = client.get("/api/dashboard", params={"period": 30}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["period"] == 30

    overview = data["overview"]
    assert overview["totalRooms"] == 2
    assert overview["occupiedRooms"] == 1
    assert overview["occupancyRate"] == 50
    assert overview["activeBookings"] == 1
    assert overview["pendingPayments"] == 1
    assert overview["unreadContacts"] == 1
    assert overview["monthlyRevenue"] == 520

    trends = data["trends"]
    assert len(trends["revenueByMonth"]) == 12
    assert trends["revenueByMonth"][-1] == {"month": today.strftime("%Y-%m"), "revenue": 520}

    assert data["distribution"]["roomsByStatus"] == {"OCCUPIED": 1, "AVAILABLE": 1}
    assert data["distribution"]["usersByRole"] == {"ADMIN": 1, "RESIDENT": 1}

    details = data["details"]
    assert details["topRooms"][0]["number"] == 1
    assert [p["amount"] for p in details["upcomingPayments"]] == [520]
    assert details["recentContacts"][0]["email"] == "jean@example.com"


def test_dashboard_on_empty_database(client, admin_headers):
    data = client.get("/api/dashboard", headers=admin_headers).json()["data"]

    assert data["period"] == 30
    assert data["overview"]["occupancyRate"] == 0
    assert data["details"]["topRooms"] == []
