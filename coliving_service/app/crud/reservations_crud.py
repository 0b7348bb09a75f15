import logging

from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import not_found_response
from shared.models.users import User
from shared.utils.enums import UserRole, UserStatus
from ..models.bookings import Booking
from ..models.rooms import Room
from ..schemas.bookings_schemas import BookingCreate, ReservationCreate
from . import bookings_crud
from .users_crud import find_user_by_email

logger = logging.getLogger(__name__)


def create_reservation(db: Session, data: ReservationCreate) -> Booking:
    """Public booking: the room price is the rent, one month is the deposit."""
    room = db.query(Room).filter(Room.id == data.room_id, Room.is_active.is_(True)).first()
    if not room:
        return not_found_response("Chambre non trouvée")

    user = find_user_by_email(db, data.email)
    if not user:
        user = User(
            email=data.email.lower(),
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            role=UserRole.PROSPECT.value,
            status=UserStatus.ACTIVE.value
        )
        db.add(user)
        db.flush()
        logger.info(f"Prospect {user.email} created from a reservation")
    elif data.phone and not user.phone:
        user.phone = data.phone

    booking = BookingCreate(
        user_id=user.id,
        room_id=room.id,
        start_date=data.start_date,
        end_date=data.end_date,
        monthly_rent=room.price,
        security_deposit=room.price,
        notes=data.notes
    )
    return bookings_crud.create_booking(db, booking)
