import os
from datetime import date

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["APP_BASE_URL"] = "http://testserver"
os.environ.pop("SMTP_HOST", None)

import pytest
from fastapi.testclient import TestClient

from shared.core.auth import create_user_token
from shared.core.database import Base, SessionLocal, engine
from shared.models.users import User
from shared.utils.enums import UserRole, UserStatus
from coliving_service.app.main import app
from coliving_service.app.enum.coliving_enum import BookingStatus, RoomStatus
from coliving_service.app.models.bookings import Booking
from coliving_service.app.models.rooms import Room
from coliving_service.app.services.signature_pad import SignaturePad

ADMIN_PASSWORD = "Admin-password-1"


def _drawn_signature() -> str:
    pad = SignaturePad(width=120, height=50)
    pad.pointer_down(10, 25)
    pad.pointer_move(60, 10)
    pad.pointer_move(110, 40)
    pad.pointer_up()
    return pad.to_data_url()


PNG_DATA_URL = _drawn_signature()


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(email=None, role=UserRole.RESIDENT.value, status=UserStatus.ACTIVE.value,
              first_name="Marie", last_name="Dupont", password=None):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            first_name=first_name,
            last_name=last_name,
            role=role,
            status=status
        )
        if password:
            user.set_password(password)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(email="admin@example.com", role=UserRole.ADMIN.value,
                     first_name="Admin", last_name="Coliving", password=ADMIN_PASSWORD)


@pytest.fixture
def admin_headers(admin_user):
    return {"Authorization": f"Bearer {create_user_token(admin_user)}"}


@pytest.fixture
def make_room(db):
    def _make(number=1, price=520, status=RoomStatus.AVAILABLE.value, has_balcony=False, floor=0):
        room = Room(
            name=f"Chambre {number}",
            number=number,
            price=price,
            surface=12,
            description="Chambre meublée et lumineuse",
            has_balcony=has_balcony,
            floor=floor,
            images=[],
            status=status,
            is_active=True
        )
        db.add(room)
        db.commit()
        db.refresh(room)
        return room

    return _make


@pytest.fixture
def make_booking(db):
    def _make(user, room, status=BookingStatus.PENDING.value,
              start_date=date(2025, 1, 1), end_date=None, monthly_rent=520, security_deposit=0):
        booking = Booking(
            user_id=user.id,
            room_id=room.id,
            start_date=start_date,
            end_date=end_date,
            monthly_rent=monthly_rent,
            security_deposit=security_deposit,
            total_amount=monthly_rent + security_deposit,
            status=status
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make
