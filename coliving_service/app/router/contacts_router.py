from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_staff
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import build_pagination, success_response
from ..crud import contacts_crud as crud
from ..schemas.contacts_schemas import ContactCreate, ContactOut, ContactRequest, ContactUpdate

router = APIRouter(prefix="/api/contact", tags=["Contacts"])


# ---------------- Contact form (public) ----------------
@router.post("", response_model=JsonOutResult[ContactOut], status_code=201)
def create_contact(data: ContactCreate, db: Session = Depends(get_db)):
    contact = crud.create_contact(db, data)
    return success_response(
        data=ContactOut.model_validate(contact),
        message="Votre message a bien été envoyé"
    )


# ---------------- Inbox ----------------
@router.get("", response_model=JsonOutResult[List[ContactOut]])
def get_contacts(
    status: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    is_read: Optional[bool] = Query(None, alias="isRead"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    params = ContactRequest(status=status, email=email, is_read=is_read, page=page, limit=limit)
    contacts, total = crud.get_contacts(db, params)
    return success_response(
        data=[ContactOut.model_validate(c) for c in contacts],
        pagination=build_pagination(page, limit, total)
    )


@router.patch("", response_model=JsonOutResult[ContactOut])
def update_contact(
    data: ContactUpdate,
    id: str = Query(...),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    contact = crud.update_contact(db, id, data, current_user)
    return success_response(data=ContactOut.model_validate(contact), message="Message mis à jour")


@router.delete("", response_model=JsonOutResult)
def delete_contact(
    id: str = Query(...),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    crud.delete_contact(db, id)
    return success_response(message="Message supprimé")
