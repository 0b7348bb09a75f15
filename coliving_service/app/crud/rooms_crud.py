import logging
from typing import Dict, List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ..enum.coliving_enum import (
    BLOCKING_BOOKING_STATUSES, BookingStatus, RoomStatus)
from ..models.bookings import Booking
from ..models.rooms import Room
from ..schemas.common_schemas import BookingBrief, UserBrief
from ..schemas.rooms_schemas import (
    RoomBulkAction, RoomCreate, RoomDetailOut, RoomOut, RoomPatchAction, RoomRequest, RoomStats, RoomUpdate)

logger = logging.getLogger(__name__)

RESTRICTED_ROOM_STATUSES = (RoomStatus.MAINTENANCE.value, RoomStatus.UNAVAILABLE.value)
ROOM_DELETE_BLOCKING_STATUSES = BLOCKING_BOOKING_STATUSES + (BookingStatus.PENDING.value,)


# ----------------- Helpers -----------------
def count_room_bookings(db: Session, room_ids: List[str], statuses) -> int:
    return db.query(func.count(Booking.id)).filter(
        Booking.room_id.in_(room_ids),
        Booking.status.in_(statuses)
    ).scalar() or 0


def get_room_or_404(db: Session, room_id: str) -> Room:
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        return not_found_response("Chambre non trouvée")
    return room


def _ensure_number_free(db: Session, number: int, exclude_id: str = None):
    query = db.query(Room.id).filter(Room.number == number)
    if exclude_id:
        query = query.filter(Room.id != exclude_id)
    if query.first():
        return error_response(
            message="Une chambre avec ce numéro existe déjà",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )


def _active_bookings_by_room(db: Session, room_ids: List[str]) -> Dict[str, List[Booking]]:
    grouped: Dict[str, List[Booking]] = {room_id: [] for room_id in room_ids}
    if not room_ids:
        return grouped
    bookings = (
        db.query(Booking)
        .options(joinedload(Booking.user))
        .filter(Booking.room_id.in_(room_ids), Booking.status == BookingStatus.ACTIVE.value)
        .order_by(Booking.start_date.asc())
        .all()
    )
    for booking in bookings:
        grouped[booking.room_id].append(booking)
    return grouped


def to_room_out(room: Room, active_bookings: List[Booking]) -> RoomOut:
    out = RoomOut.model_validate(room)
    out.active_bookings = [BookingBrief.model_validate(b) for b in active_bookings]
    return out


# ----------------- Build Filters -----------------
def build_room_filters(params: RoomRequest):
    filters = []

    if params.status:
        filters.append(Room.status == params.status.value)

    if params.min_price is not None:
        filters.append(Room.price >= params.min_price)

    if params.max_price is not None:
        filters.append(Room.price <= params.max_price)

    # only an explicit "true" narrows the list
    if params.has_balcony == "true":
        filters.append(Room.has_balcony.is_(True))

    if params.floor is not None:
        filters.append(Room.floor == params.floor)

    return filters


# ----------------- Get All Rooms -----------------
def get_rooms(db: Session, params: RoomRequest) -> Tuple[List[RoomOut], int]:
    base_query = db.query(Room).filter(*build_room_filters(params))
    total = base_query.with_entities(func.count(Room.id)).scalar() or 0

    rooms = (
        base_query
        .order_by(Room.number.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )

    active = _active_bookings_by_room(db, [r.id for r in rooms])
    return [to_room_out(room, active[room.id]) for room in rooms], total


# ----------------- Get Single Room -----------------
def get_room_detail(db: Session, room_id: str) -> RoomDetailOut:
    room = get_room_or_404(db, room_id)
    active = _active_bookings_by_room(db, [room.id])[room.id]

    total_bookings = db.query(func.count(Booking.id)).filter(
        Booking.room_id == room.id).scalar() or 0

    current = active[0] if active else None
    stats = RoomStats(
        total_bookings=total_bookings,
        active_bookings=len(active),
        total_revenue=float(sum(b.monthly_rent or 0 for b in active)),
        current_tenant=UserBrief.model_validate(current.user) if current else None
    )
    return RoomDetailOut(**to_room_out(room, active).model_dump(), stats=stats)


# ----------------- Create Room -----------------
def create_room(db: Session, data: RoomCreate) -> Room:
    _ensure_number_free(db, data.number)

    room = Room(
        **data.model_dump(mode="json"),
        status=RoomStatus.AVAILABLE.value,
        is_active=True
    )
    db.add(room)
    db.commit()
    db.refresh(room)
    logger.info(f"Room {room.number} created ({room.id})")
    return room


# ----------------- Update Room -----------------
def update_room(db: Session, room_id: str, data: RoomUpdate) -> Room:
    room = get_room_or_404(db, room_id)
    update_data = data.model_dump(exclude_unset=True, mode="json")

    if "number" in update_data and update_data["number"] != room.number:
        _ensure_number_free(db, update_data["number"], exclude_id=room.id)

    disabling = (
        update_data.get("status") in RESTRICTED_ROOM_STATUSES
        or update_data.get("is_active") is False
    )
    if disabling and count_room_bookings(db, [room.id], BLOCKING_BOOKING_STATUSES):
        return error_response(
            message="Impossible de désactiver une chambre avec des réservations actives",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    for key, value in update_data.items():
        setattr(room, key, value)

    db.commit()
    db.refresh(room)
    return room


# ----------------- Patch Room -----------------
def patch_room(db: Session, room_id: str, data: RoomPatchAction) -> Room:
    room = get_room_or_404(db, room_id)

    if data.action == "toggle_availability":
        if room.status == RoomStatus.AVAILABLE.value:
            room.status = RoomStatus.UNAVAILABLE.value
        elif room.status == RoomStatus.UNAVAILABLE.value:
            room.status = RoomStatus.AVAILABLE.value
        else:
            return error_response(
                message=f"Impossible de changer la disponibilité d'une chambre {room.status}",
                status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
            )
    elif data.action == "activate_3d_tour":
        tour = data.virtual_tour or room.virtual_tour
        if not tour:
            return error_response(message="URL de visite virtuelle requise")
        room.virtual_tour = tour
        room.is_virtual_tour_active = True
    else:
        return error_response(message="Action non supportée")

    db.commit()
    db.refresh(room)
    return room


# ----------------- Bulk Actions -----------------
def bulk_update_rooms(db: Session, data: RoomBulkAction) -> int:
    query = db.query(Room).filter(Room.id.in_(data.room_ids))

    if data.action == "bulk_status":
        if data.status is None:
            return error_response(message="Statut requis")
        if (data.status.value in RESTRICTED_ROOM_STATUSES
                and count_room_bookings(db, data.room_ids, BLOCKING_BOOKING_STATUSES)):
            return error_response(
                message="Impossible de changer le statut de chambres avec des réservations actives",
                status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
            )
        count = query.update({Room.status: data.status.value}, synchronize_session=False)

    elif data.action == "bulk_activate":
        if data.is_active is None:
            return error_response(message="Valeur isActive requise")
        if not data.is_active and count_room_bookings(db, data.room_ids, BLOCKING_BOOKING_STATUSES):
            return error_response(
                message="Impossible de désactiver des chambres avec des réservations actives",
                status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
            )
        count = query.update({Room.is_active: data.is_active}, synchronize_session=False)

    else:
        return error_response(message="Action non supportée")

    db.commit()
    return count


# ----------------- Delete Rooms -----------------
def delete_rooms(db: Session, room_ids: List[str]) -> int:
    if not room_ids:
        return error_response(message="Aucun ID de chambre fourni")

    if count_room_bookings(db, room_ids, BLOCKING_BOOKING_STATUSES):
        return error_response(
            message="Impossible de supprimer des chambres avec des réservations actives",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    rooms = db.query(Room).filter(Room.id.in_(room_ids)).all()
    for room in rooms:
        # closed bookings go with the room
        for booking in list(room.bookings):
            db.delete(booking)
        db.delete(room)
    db.commit()
    logger.info(f"{len(rooms)} room(s) deleted")
    return len(rooms)


def delete_room(db: Session, room_id: str):
    room = get_room_or_404(db, room_id)

    if count_room_bookings(db, [room.id], ROOM_DELETE_BLOCKING_STATUSES):
        return error_response(
            message="Impossible de supprimer une chambre avec des réservations en cours",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    for booking in list(room.bookings):
        db.delete(booking)
    db.delete(room)
    db.commit()
