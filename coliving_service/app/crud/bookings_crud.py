import logging
import math
from datetime import date
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from shared.helpers.json_response_helper import error_response, not_found_response
from shared.models.users import User
from shared.utils.app_status_code import AppStatusCode
from ..enum.coliving_enum import (
    BLOCKING_BOOKING_STATUSES, CLOSED_BOOKING_STATUSES, BookingStatus, PaymentStatus, PaymentType, RoomStatus)
from ..models.bookings import Booking
from ..models.payments import Payment
from ..models.rooms import Room
from ..schemas.bookings_schemas import (
    BookingBulkAction, BookingCreate, BookingOut, BookingRequest, BookingStats, BookingUpdate)

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30


# ----------------- Amounts -----------------
def months_between(start_date: date, end_date: Optional[date]) -> int:
    """Billed months: one per started 30 day block, one when open ended."""
    if end_date is None:
        return 1
    days = (end_date - start_date).days
    return max(math.ceil(days / DAYS_PER_MONTH), 1)


def compute_total_amount(monthly_rent: float, security_deposit: float,
                         start_date: date, end_date: Optional[date]) -> float:
    return monthly_rent * months_between(start_date, end_date) + (security_deposit or 0)


def compute_booking_stats(payments: Iterable[Payment], today: Optional[date] = None) -> BookingStats:
    today = today or date.today()
    payments = list(payments)

    total_paid = sum(p.amount for p in payments if p.status == PaymentStatus.PAID.value)
    total_due = sum(p.amount for p in payments if p.status != PaymentStatus.CANCELLED.value)
    overdue = sum(
        1 for p in payments
        if p.status == PaymentStatus.LATE.value
        or (p.status == PaymentStatus.PENDING.value and p.due_date < today)
    )

    return BookingStats(
        total_paid=total_paid,
        total_due=total_due,
        balance=total_due - total_paid,
        overdue_payments=overdue,
        completion_rate=round(total_paid / total_due * 100) if total_due > 0 else 0
    )


def to_booking_out(booking: Booking) -> BookingOut:
    out = BookingOut.model_validate(booking)
    out.stats = compute_booking_stats(booking.payments)
    return out


# ----------------- Availability -----------------
def find_overlapping_booking(db: Session, room_id: str, start_date: date,
                             end_date: Optional[date], exclude_id: str = None) -> Optional[Booking]:
    """First ACTIVE/CONFIRMED booking of the room intersecting the period."""
    query = db.query(Booking).filter(
        Booking.room_id == room_id,
        Booking.status.in_(BLOCKING_BOOKING_STATUSES),
        or_(Booking.end_date.is_(None), Booking.end_date >= start_date)
    )
    # an open ended candidate has no upper bound
    if end_date is not None:
        query = query.filter(Booking.start_date <= end_date)
    if exclude_id:
        query = query.filter(Booking.id != exclude_id)
    return query.first()


def sync_room_status(db: Session, room_ids: Iterable[str], new_status: str,
                     excluded_booking_ids: Iterable[str] = ()):
    """Occupy rooms of activated bookings, free rooms left without blocking bookings."""
    room_ids = set(room_ids)
    if not room_ids:
        return

    if new_status == BookingStatus.ACTIVE.value:
        db.query(Room).filter(Room.id.in_(room_ids)).update(
            {Room.status: RoomStatus.OCCUPIED.value}, synchronize_session=False)
        return

    if new_status in CLOSED_BOOKING_STATUSES:
        excluded = list(excluded_booking_ids)
        for room_id in room_ids:
            remaining = db.query(func.count(Booking.id)).filter(
                Booking.room_id == room_id,
                Booking.status.in_(BLOCKING_BOOKING_STATUSES),
                Booking.id.notin_(excluded)
            ).scalar() or 0
            if remaining == 0:
                db.query(Room).filter(Room.id == room_id, Room.status == RoomStatus.OCCUPIED.value).update(
                    {Room.status: RoomStatus.AVAILABLE.value}, synchronize_session=False)
            else:
                logger.info(f"Room {room_id} kept: {remaining} booking(s) still hold it")


# ----------------- Build Filters -----------------
def build_booking_filters(params: BookingRequest):
    filters = []

    if params.status and params.status.lower() != "all":
        filters.append(Booking.status == params.status.upper())

    if params.user_id:
        filters.append(Booking.user_id == params.user_id)

    if params.room_id:
        filters.append(Booking.room_id == params.room_id)

    if params.start_date:
        filters.append(Booking.start_date >= params.start_date)

    if params.end_date:
        filters.append(Booking.end_date <= params.end_date)

    return filters


# ----------------- Get All Bookings -----------------
def get_bookings(db: Session, params: BookingRequest) -> Tuple[List[BookingOut], int]:
    base_query = db.query(Booking).filter(*build_booking_filters(params))
    total = base_query.with_entities(func.count(Booking.id)).scalar() or 0

    bookings = (
        base_query
        .options(joinedload(Booking.user), joinedload(Booking.room))
        .order_by(Booking.created_at.desc(), Booking.start_date.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return [to_booking_out(b) for b in bookings], total


# ----------------- Get Single Booking -----------------
def get_booking_or_404(db: Session, booking_id: str) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        return not_found_response("Réservation non trouvée")
    return booking


# ----------------- Create Booking -----------------
def create_booking(db: Session, data: BookingCreate) -> Booking:
    user = db.query(User).filter(User.id == data.user_id).first()
    if not user:
        return not_found_response("Utilisateur non trouvé")

    room = db.query(Room).filter(Room.id == data.room_id).first()
    if not room:
        return not_found_response("Chambre non trouvée")

    if room.status != RoomStatus.AVAILABLE.value:
        logger.info(f"Booking refused, room {room.number} is {room.status}")
        return error_response(
            message="Chambre non disponible",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    if find_overlapping_booking(db, room.id, data.start_date, data.end_date):
        return error_response(
            message="Chambre déjà réservée pour cette période",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    booking = Booking(
        user_id=user.id,
        room_id=room.id,
        start_date=data.start_date,
        end_date=data.end_date,
        monthly_rent=data.monthly_rent,
        security_deposit=data.security_deposit,
        total_amount=compute_total_amount(
            data.monthly_rent, data.security_deposit, data.start_date, data.end_date),
        status=BookingStatus.PENDING.value,
        notes=data.notes
    )
    db.add(booking)
    db.flush()

    # booking and its deposit are committed together
    if data.security_deposit > 0:
        db.add(Payment(
            booking_id=booking.id,
            user_id=user.id,
            amount=data.security_deposit,
            type=PaymentType.SECURITY_DEPOSIT.value,
            status=PaymentStatus.PENDING.value,
            due_date=data.start_date,
            description="Dépôt de garantie"
        ))

    db.commit()
    db.refresh(booking)
    logger.info(f"Booking {booking.id} created for room {room.number}")
    return booking


# ----------------- Update Booking -----------------
def update_booking(db: Session, booking_id: str, data: BookingUpdate) -> Booking:
    booking = get_booking_or_404(db, booking_id)
    update_data = data.model_dump(exclude_unset=True, mode="python")
    if "status" in update_data and update_data["status"] is not None:
        update_data["status"] = update_data["status"].value

    start_date = update_data.get("start_date", booking.start_date)
    end_date = update_data.get("end_date", booking.end_date)
    if end_date and start_date and end_date < start_date:
        return error_response(message="La date de fin doit être postérieure à la date de début")

    new_status = update_data.get("status", booking.status)
    if new_status in BLOCKING_BOOKING_STATUSES and ({"start_date", "end_date"} & update_data.keys()
                                                    or new_status != booking.status):
        if find_overlapping_booking(db, booking.room_id, start_date, end_date, exclude_id=booking.id):
            return error_response(
                message="Chambre déjà réservée pour cette période",
                status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
            )

    for key, value in update_data.items():
        setattr(booking, key, value)

    if {"start_date", "end_date", "monthly_rent"} & update_data.keys():
        booking.total_amount = compute_total_amount(
            booking.monthly_rent, booking.security_deposit, booking.start_date, booking.end_date)

    if "status" in update_data:
        db.flush()
        sync_room_status(db, [booking.room_id], booking.status, excluded_booking_ids=[booking.id])

    db.commit()
    db.refresh(booking)
    return booking


# ----------------- Bulk Status -----------------
def bulk_update_bookings(db: Session, data: BookingBulkAction) -> int:
    if data.action != "bulk_status":
        return error_response(message="Action non supportée")

    valid_statuses = [s.value for s in BookingStatus]
    if not data.status or data.status not in valid_statuses:
        return error_response(
            message="Statut invalide",
            status_code=AppStatusCode.INVALID_INPUT
        )

    bookings = db.query(Booking).filter(Booking.id.in_(data.booking_ids)).all()
    room_ids = {b.room_id for b in bookings}

    count = db.query(Booking).filter(Booking.id.in_(data.booking_ids)).update(
        {Booking.status: data.status}, synchronize_session=False)

    sync_room_status(db, room_ids, data.status, excluded_booking_ids=data.booking_ids)

    db.commit()
    logger.info(f"{count} booking(s) moved to {data.status}")
    return count


# ----------------- Delete Bookings -----------------
def delete_bookings(db: Session, booking_ids: List[str]) -> int:
    if not booking_ids:
        return error_response(message="Aucun ID de réservation fourni")

    bookings = db.query(Booking).filter(Booking.id.in_(booking_ids)).all()

    # all or nothing
    if any(b.status not in CLOSED_BOOKING_STATUSES for b in bookings):
        return error_response(
            message="Impossible de supprimer des réservations actives ou confirmées",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    for booking in bookings:
        db.delete(booking)
    db.commit()
    return len(bookings)
