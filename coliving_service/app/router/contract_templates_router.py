from typing import Dict, List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_admin
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import error_response, success_response
from shared.utils.app_status_code import AppStatusCode
from ..crud import contract_templates_crud as crud
from ..schemas.contract_templates_schemas import (
    ContractTemplateCreate, ContractTemplateOut, ContractTemplateUpdate, EditorCommandOut,
    EditorCommandRequest, TemplatePreviewOut, TemplatePreviewRequest, TemplateVariable)
from ..services.template_editor import apply_command

router = APIRouter(
    prefix="/api/contract-templates",
    tags=["Contract templates"],
    dependencies=[Depends(require_admin)]
)


# ---------------- Editor helpers ----------------
@router.get("/variables", response_model=JsonOutResult[Dict[str, List[TemplateVariable]]])
def get_variables():
    return success_response(data=crud.get_template_variables())


@router.post("/preview", response_model=JsonOutResult[TemplatePreviewOut])
def preview_template(data: TemplatePreviewRequest, db: Session = Depends(get_db)):
    return success_response(data=crud.preview_template(db, data))


@router.post("/editor", response_model=JsonOutResult[EditorCommandOut])
def apply_editor_command(data: EditorCommandRequest):
    try:
        result = apply_command(
            data.content, data.selection_start, data.selection_end, data.command, data.value)
    except ValueError as e:
        return error_response(message=str(e), status_code=AppStatusCode.INVALID_INPUT)
    return success_response(data=EditorCommandOut(
        content=result.content,
        selection_start=result.selection_start,
        selection_end=result.selection_end
    ))


# ---------------- CRUD ----------------
@router.get("", response_model=JsonOutResult[List[ContractTemplateOut]])
def get_templates(db: Session = Depends(get_db)):
    return success_response(data=[ContractTemplateOut.model_validate(t) for t in crud.get_templates(db)])


@router.post("", response_model=JsonOutResult[ContractTemplateOut], status_code=201)
def create_template(
    data: ContractTemplateCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_admin)
):
    template = crud.create_template(db, data, current_user)
    return success_response(data=ContractTemplateOut.model_validate(template), message="Template créé")


@router.get("/{template_id}", response_model=JsonOutResult[ContractTemplateOut])
def get_template(template_id: str, db: Session = Depends(get_db)):
    return success_response(data=ContractTemplateOut.model_validate(crud.get_template_or_404(db, template_id)))


@router.put("/{template_id}", response_model=JsonOutResult[ContractTemplateOut])
def update_template(template_id: str, data: ContractTemplateUpdate, db: Session = Depends(get_db)):
    template = crud.update_template(db, template_id, data)
    return success_response(data=ContractTemplateOut.model_validate(template), message="Template mis à jour")


@router.delete("/{template_id}", response_model=JsonOutResult)
def delete_template(template_id: str, db: Session = Depends(get_db)):
    crud.delete_template(db, template_id)
    return success_response(message="Template supprimé")


@router.post("/{template_id}/set-default", response_model=JsonOutResult[ContractTemplateOut])
def set_default_template(template_id: str, db: Session = Depends(get_db)):
    template = crud.set_default_template(db, template_id)
    return success_response(data=ContractTemplateOut.model_validate(template), message="Template par défaut mis à jour")
