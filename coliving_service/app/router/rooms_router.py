from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_staff
from shared.core.database import get_db
from shared.core.schemas import ActionResult, JsonOutResult, UserToken
from shared.helpers.json_response_helper import build_pagination, success_response
from ..crud import rooms_crud as crud
from ..enum.coliving_enum import RoomStatus
from ..schemas.rooms_schemas import (
    RoomBulkAction, RoomCreate, RoomDetailOut, RoomOut, RoomPatchAction, RoomRequest, RoomUpdate)

router = APIRouter(prefix="/api/rooms", tags=["Rooms"])


# ---------------- List Rooms (public) ----------------
@router.get("", response_model=JsonOutResult[List[RoomOut]])
def get_rooms(
    status: Optional[RoomStatus] = Query(None),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    has_balcony: Optional[str] = Query(None, alias="hasBalcony"),
    floor: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    params = RoomRequest(status=status, min_price=min_price, max_price=max_price,
                         has_balcony=has_balcony, floor=floor, page=page, limit=limit)
    rooms, total = crud.get_rooms(db, params)
    return success_response(data=rooms, pagination=build_pagination(page, limit, total))


# ---------------- Create Room ----------------
@router.post("", response_model=JsonOutResult[RoomOut], status_code=201)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    room = crud.create_room(db, data)
    return success_response(data=crud.to_room_out(room, []), message="Chambre créée avec succès")


# ---------------- Bulk Actions ----------------
@router.put("", response_model=JsonOutResult[ActionResult])
def bulk_update_rooms(
    data: RoomBulkAction,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    count = crud.bulk_update_rooms(db, data)
    return success_response(data=ActionResult(count=count), message=f"{count} chambre(s) mise(s) à jour")


@router.delete("", response_model=JsonOutResult[ActionResult])
def delete_rooms(
    ids: str = Query("", description="Comma separated room ids"),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    room_ids = [i.strip() for i in ids.split(",") if i.strip()]
    count = crud.delete_rooms(db, room_ids)
    return success_response(data=ActionResult(count=count), message=f"{count} chambre(s) supprimée(s)")


# ---------------- Single Room ----------------
@router.get("/{room_id}", response_model=JsonOutResult[RoomDetailOut])
def get_room(room_id: str, db: Session = Depends(get_db)):
    return success_response(data=crud.get_room_detail(db, room_id))


@router.put("/{room_id}", response_model=JsonOutResult[RoomDetailOut])
def update_room(
    room_id: str,
    data: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    crud.update_room(db, room_id, data)
    return success_response(data=crud.get_room_detail(db, room_id), message="Chambre mise à jour")


@router.patch("/{room_id}", response_model=JsonOutResult[RoomDetailOut])
def patch_room(
    room_id: str,
    data: RoomPatchAction,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    crud.patch_room(db, room_id, data)
    return success_response(data=crud.get_room_detail(db, room_id), message="Chambre mise à jour")


@router.delete("/{room_id}", response_model=JsonOutResult)
def delete_room(
    room_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    crud.delete_room(db, room_id)
    return success_response(message="Chambre supprimée avec succès")
