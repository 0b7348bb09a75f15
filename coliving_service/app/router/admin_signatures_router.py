from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_admin
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import success_response
from ..crud import admin_signatures_crud as crud
from ..schemas.admin_signatures_schemas import AdminSignatureCreate, AdminSignatureOut, AdminSignatureUpdate

router = APIRouter(
    prefix="/api/admin-signatures",
    tags=["Admin signatures"],
    dependencies=[Depends(require_admin)]
)


@router.get("", response_model=JsonOutResult[List[AdminSignatureOut]])
def get_signatures(db: Session = Depends(get_db)):
    return success_response(data=[AdminSignatureOut.model_validate(s) for s in crud.get_signatures(db)])


@router.post("", response_model=JsonOutResult[AdminSignatureOut], status_code=201)
def create_signature(
    data: AdminSignatureCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_admin)
):
    signature = crud.create_signature(db, data, current_user)
    return success_response(data=AdminSignatureOut.model_validate(signature), message="Signature enregistrée")


@router.put("/{signature_id}", response_model=JsonOutResult[AdminSignatureOut])
def update_signature(signature_id: str, data: AdminSignatureUpdate, db: Session = Depends(get_db)):
    signature = crud.update_signature(db, signature_id, data)
    return success_response(data=AdminSignatureOut.model_validate(signature), message="Signature mise à jour")


@router.delete("", response_model=JsonOutResult)
def delete_signature(id: str = Query(...), db: Session = Depends(get_db)):
    crud.delete_signature(db, id)
    return success_response(message="Signature supprimée")
