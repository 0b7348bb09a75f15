from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.database import get_db
from shared.core.schemas import JsonOutResult
from shared.helpers.json_response_helper import success_response
from ..crud import reservations_crud as crud
from ..crud.bookings_crud import to_booking_out
from ..schemas.bookings_schemas import BookingOut, ReservationCreate

router = APIRouter(prefix="/api/reservations", tags=["Reservations"])


@router.post("", response_model=JsonOutResult[BookingOut], status_code=201)
def create_reservation(data: ReservationCreate, db: Session = Depends(get_db)):
    booking = crud.create_reservation(db, data)
    return success_response(
        data=to_booking_out(booking),
        message="Demande de réservation enregistrée"
    )
