from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from shared.core.auth import require_staff
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import build_pagination, success_response
from ..crud import contracts_crud as crud
from ..enum.contract_enum import ContractStatus
from ..schemas.contracts_schemas import (
    ContractGenerate, ContractOut, ContractSend, ContractSummaryOut, ContractUpdate, SendContractOut,
    SignatureOut, SignContractOut, SignContractRequest, SigningSessionOut, ContractRequest)

router = APIRouter(prefix="/api/contracts", tags=["Contracts"])

# public page data for a signing link
signing_router = APIRouter(prefix="/api/sign-contract", tags=["Contracts"])


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    return request.client.host if request.client else None


# ---------------- Generate / List ----------------
@router.post("/generate", response_model=JsonOutResult[ContractOut], status_code=201)
def generate_contract(
    data: ContractGenerate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    contract = crud.generate_contract(db, data)
    return success_response(data=ContractOut.model_validate(contract), message="Contrat généré avec succès")


@router.get("", response_model=JsonOutResult[List[ContractSummaryOut]])
def get_contracts(
    status: Optional[str] = Query(None),
    booking_id: Optional[str] = Query(None, alias="bookingId"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    params = ContractRequest(status=status, booking_id=booking_id, page=page, limit=limit)
    contracts, total = crud.get_contracts(db, params)
    return success_response(
        data=[crud.to_contract_summary(c) for c in contracts],
        pagination=build_pagination(page, limit, total)
    )


# ---------------- Single Contract ----------------
@router.get("/{contract_id}", response_model=JsonOutResult[ContractSummaryOut])
def get_contract(
    contract_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    return success_response(data=crud.to_contract_summary(crud.get_contract_or_404(db, contract_id)))


@router.put("/{contract_id}", response_model=JsonOutResult[ContractOut])
def update_contract(
    contract_id: str,
    data: ContractUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    contract = crud.update_contract(db, contract_id, data)
    return success_response(data=ContractOut.model_validate(contract), message="Contrat mis à jour")


@router.delete("/{contract_id}", response_model=JsonOutResult)
def delete_contract(
    contract_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    crud.delete_contract(db, contract_id)
    return success_response(message="Contrat supprimé")


# ---------------- Signing ----------------
@router.post("/{contract_id}/send", response_model=JsonOutResult[SendContractOut])
def send_contract(
    contract_id: str,
    data: ContractSend,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    contract, signing_url, email_sent = crud.send_contract(db, contract_id, data)
    return success_response(
        data=SendContractOut(
            contract=ContractOut.model_validate(contract),
            signing_url=signing_url,
            email_sent=email_sent
        ),
        message="Contrat envoyé pour signature"
    )


@router.post("/{contract_id}/sign", response_model=JsonOutResult[SignContractOut])
def sign_contract(
    contract_id: str,
    data: SignContractRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    signature, all_signed, contract = crud.sign_contract(
        db, contract_id, data, client_ip(request), request.headers.get("user-agent"))
    return success_response(
        data=SignContractOut(
            signature=SignatureOut.model_validate(signature),
            all_signed=all_signed,
            contract_status=contract.status
        ),
        message="Contrat signé avec succès"
    )


@router.get("/{contract_id}/signatures", response_model=JsonOutResult[List[SignatureOut]])
def get_signatures(
    contract_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    signatures = crud.get_contract_signatures(db, contract_id)
    return success_response(data=[SignatureOut.model_validate(s) for s in signatures])


@signing_router.get("/{token}", response_model=JsonOutResult[SigningSessionOut])
def get_signing_session(token: str, db: Session = Depends(get_db)):
    session = crud.get_signing_session(db, token)
    return success_response(data=SigningSessionOut(
        contract=ContractOut.model_validate(session["contract"]),
        signatures=[SignatureOut.model_validate(s) for s in session["signatures"]],
        signer_email=session["signer_email"],
        signer_name=session["signer_name"],
        signer_role=session["signer_role"],
        already_signed=session["already_signed"]
    ))


# ---------------- Lifecycle ----------------
def _lifecycle(db: Session, contract_id: str, target: ContractStatus, message: str):
    contract = crud.change_status(db, contract_id, target.value)
    return success_response(data=ContractOut.model_validate(contract), message=message)


@router.post("/{contract_id}/activate", response_model=JsonOutResult[ContractOut])
def activate_contract(
    contract_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    return _lifecycle(db, contract_id, ContractStatus.ACTIVE, "Contrat activé")


@router.post("/{contract_id}/terminate", response_model=JsonOutResult[ContractOut])
def terminate_contract(
    contract_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    return _lifecycle(db, contract_id, ContractStatus.TERMINATED, "Contrat résilié")


@router.post("/{contract_id}/expire", response_model=JsonOutResult[ContractOut])
def expire_contract(
    contract_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    return _lifecycle(db, contract_id, ContractStatus.EXPIRED, "Contrat expiré")


# ---------------- PDF ----------------
@router.post("/{contract_id}/regenerate-pdf", response_model=JsonOutResult[ContractOut])
def regenerate_pdf(
    contract_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    contract = crud.regenerate_pdf(db, contract_id)
    return success_response(data=ContractOut.model_validate(contract), message="PDF régénéré")


@router.post("/{contract_id}/generate-final-pdf", response_model=JsonOutResult[ContractOut])
def generate_final_pdf(
    contract_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    contract = crud.generate_final_pdf(db, contract_id)
    return success_response(data=ContractOut.model_validate(contract), message="PDF final généré")
