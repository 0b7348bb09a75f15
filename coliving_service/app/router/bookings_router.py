from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_staff
from shared.core.database import get_db
from shared.core.schemas import ActionResult, JsonOutResult, UserToken
from shared.helpers.json_response_helper import build_pagination, success_response
from ..crud import bookings_crud as crud
from ..schemas.bookings_schemas import (
    BookingBulkAction, BookingCreate, BookingOut, BookingRequest, BookingUpdate)

router = APIRouter(prefix="/api/booking", tags=["Bookings"])


# ---------------- List Bookings ----------------
@router.get("", response_model=JsonOutResult[List[BookingOut]])
def get_bookings(
    status: Optional[str] = Query(None),
    user_id: Optional[str] = Query(None, alias="userId"),
    room_id: Optional[str] = Query(None, alias="roomId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    params = BookingRequest(status=status, user_id=user_id, room_id=room_id,
                            start_date=start_date, end_date=end_date, page=page, limit=limit)
    bookings, total = crud.get_bookings(db, params)
    return success_response(data=bookings, pagination=build_pagination(page, limit, total))


# ---------------- Create Booking ----------------
@router.post("", response_model=JsonOutResult[BookingOut], status_code=201)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    booking = crud.create_booking(db, data)
    return success_response(data=crud.to_booking_out(booking), message="Réservation créée avec succès")


# ---------------- Bulk Status ----------------
@router.put("", response_model=JsonOutResult[ActionResult])
def bulk_update_bookings(
    data: BookingBulkAction,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    count = crud.bulk_update_bookings(db, data)
    return success_response(data=ActionResult(count=count), message=f"{count} réservation(s) mise(s) à jour")


# ---------------- Delete Bookings ----------------
@router.delete("", response_model=JsonOutResult[ActionResult])
def delete_bookings(
    ids: str = Query(""),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    booking_ids = [i.strip() for i in ids.split(",") if i.strip()]
    count = crud.delete_bookings(db, booking_ids)
    return success_response(data=ActionResult(count=count), message=f"{count} réservation(s) supprimée(s)")


# ---------------- Single Booking ----------------
@router.get("/{booking_id}", response_model=JsonOutResult[BookingOut])
def get_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    return success_response(data=crud.to_booking_out(crud.get_booking_or_404(db, booking_id)))


@router.put("/{booking_id}", response_model=JsonOutResult[BookingOut])
def update_booking(
    booking_id: str,
    data: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    booking = crud.update_booking(db, booking_id, data)
    return success_response(data=crud.to_booking_out(booking), message="Réservation mise à jour")
