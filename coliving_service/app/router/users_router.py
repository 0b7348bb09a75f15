from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_admin
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import build_pagination, success_response
from ..crud import users_crud as crud
from ..schemas.users_schemas import UserCreate, UserOut, UserRequest, UserUpdate

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=JsonOutResult[List[UserOut]])
def get_users(
    role: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_admin)
):
    params = UserRequest(role=role, status=status, search=search, page=page, limit=limit)
    users, total = crud.get_users(db, params)
    return success_response(data=users, pagination=build_pagination(page, limit, total))


@router.post("", response_model=JsonOutResult[UserOut], status_code=201)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_admin)
):
    user = crud.create_user(db, data)
    return success_response(data=crud.to_user_out(db, user), message="Utilisateur créé avec succès")


@router.get("/{user_id}", response_model=JsonOutResult[UserOut])
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_admin)
):
    return success_response(data=crud.to_user_out(db, crud.get_user_or_404(db, user_id)))


@router.put("/{user_id}", response_model=JsonOutResult[UserOut])
def update_user(
    user_id: str,
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_admin)
):
    user = crud.update_user(db, user_id, data, current_user)
    return success_response(data=crud.to_user_out(db, user), message="Utilisateur mis à jour")


@router.delete("/{user_id}", response_model=JsonOutResult)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_admin)
):
    crud.delete_user(db, user_id, current_user)
    return success_response(message="Utilisateur supprimé")
