import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from shared.core.config import settings
from shared.helpers.email_helper import EmailHelper
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ..enum.contract_enum import ContractStatus, SignerRole
from ..models.bookings import Booking
from ..models.contract_signatures import ContractSignature
from ..models.contracts import Contract
from ..schemas.contracts_schemas import (
    ContractGenerate, ContractRequest, ContractSend, ContractSummaryOut, ContractUpdate, SignContractRequest)
from ..schemas.common_schemas import RoomBrief
from ..services import contract_template_engine as engine
from ..services.contract_pdf import build_contract_pdf, is_pdf_data_url, to_data_url
from ..services.email_templates import get_contract_signed_email_template, get_signing_email_template
from ..services.signing_client import same_email
from ..services.signing_tokens import InvalidSigningToken, create_signing_token, verify_signing_token
from . import admin_signatures_crud, contract_templates_crud

logger = logging.getLogger(__name__)

STATUS_ORDER = [
    ContractStatus.DRAFT.value,
    ContractStatus.PENDING.value,
    ContractStatus.SENT.value,
    ContractStatus.SIGNED.value,
    ContractStatus.ACTIVE.value,
]
TERMINAL_STATUSES = (ContractStatus.EXPIRED.value, ContractStatus.TERMINATED.value)
SIGNABLE_STATUSES = (ContractStatus.PENDING.value, ContractStatus.SENT.value, ContractStatus.SIGNED.value)


# ----------------- State machine -----------------
def can_transition(current: str, target: str) -> bool:
    """Forward only along STATUS_ORDER; EXPIRED/TERMINATED from any live state."""
    if current in TERMINAL_STATUSES:
        return False
    if target in TERMINAL_STATUSES:
        return True
    if current not in STATUS_ORDER or target not in STATUS_ORDER:
        return False
    return STATUS_ORDER.index(target) > STATUS_ORDER.index(current)


def transition(contract: Contract, target: str):
    if not can_transition(contract.status, target):
        logger.info(f"Refused contract transition {contract.status} -> {target} ({contract.id})")
        return error_response(
            message=f"Transition de statut invalide : {contract.status} -> {target}",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )
    logger.info(f"Contract {contract.contract_number}: {contract.status} -> {target}")
    contract.status = target
    if target in (ContractStatus.SIGNED.value, ContractStatus.ACTIVE.value) and not contract.signed_at:
        contract.signed_at = datetime.utcnow()


def generate_contract_number() -> str:
    return f"CTR-{datetime.utcnow():%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"


# ----------------- Lookups -----------------
def get_contract_or_404(db: Session, contract_id: str) -> Contract:
    contract = (
        db.query(Contract)
        .options(joinedload(Contract.booking).joinedload(Booking.user),
                 joinedload(Contract.booking).joinedload(Booking.room))
        .filter(Contract.id == contract_id)
        .first()
    )
    if not contract:
        return not_found_response("Contrat non trouvé")
    return contract


def build_contract_filters(params: ContractRequest):
    filters = []

    if params.status and params.status.lower() != "all":
        filters.append(Contract.status == params.status.upper())

    if params.booking_id:
        filters.append(Contract.booking_id == params.booking_id)

    return filters


def get_contracts(db: Session, params: ContractRequest) -> Tuple[List[Contract], int]:
    base_query = db.query(Contract).filter(*build_contract_filters(params))
    total = base_query.with_entities(func.count(Contract.id)).scalar() or 0

    contracts = (
        base_query
        .options(joinedload(Contract.booking).joinedload(Booking.user))
        .order_by(Contract.created_at.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return contracts, total


def to_contract_summary(contract: Contract) -> ContractSummaryOut:
    out = ContractSummaryOut.model_validate(contract)
    if contract.booking and contract.booking.room:
        out.room = RoomBrief.model_validate(contract.booking.room)
    return out


def get_contract_signatures(db: Session, contract_id: str) -> List[ContractSignature]:
    get_contract_or_404(db, contract_id)
    return (
        db.query(ContractSignature)
        .filter(ContractSignature.contract_id == contract_id)
        .order_by(ContractSignature.signed_at.asc())
        .all()
    )


# ----------------- Rendering -----------------
def _signature_images(db: Session, contract: Contract) -> Dict[str, str]:
    images = {}
    admin_signature = admin_signatures_crud.get_default_signature(db)
    if admin_signature:
        images["ADMIN_SIGNATURE"] = admin_signature.signature_data
    for signature in contract.signatures:
        images.setdefault(f"{signature.signer_role}_SIGNATURE", signature.signature_data)
    return images


def _template_body(contract: Contract) -> str:
    if contract.template is not None:
        return contract.template.pdf_data
    # template removed since generation: keep the rendered text
    return contract.content or engine.DEFAULT_CONTRACT_BODY


def render_contract(contract: Contract, signatures: Optional[Dict[str, str]] = None):
    """Render content and PDF from the contract's template and figures."""
    body = _template_body(contract)

    if is_pdf_data_url(body):
        # uploaded PDF templates are used as is
        contract.content = None
        contract.pdf_url = body
        return

    context = engine.build_contract_context(contract, contract.booking, settings)
    contract.content = engine.render(body, context)
    pdf_bytes = build_contract_pdf(contract.content, reference=contract.contract_number,
                                   signatures=signatures or {})
    contract.pdf_url = to_data_url(pdf_bytes)


# ----------------- Generate Contract -----------------
def generate_contract(db: Session, data: ContractGenerate) -> Contract:
    booking = (
        db.query(Booking)
        .options(joinedload(Booking.user), joinedload(Booking.room))
        .filter(Booking.id == data.booking_id)
        .first()
    )
    if not booking:
        return not_found_response("Réservation non trouvée")

    template = None
    if data.template_id:
        template = contract_templates_crud.get_template_or_404(db, data.template_id)
    else:
        template = contract_templates_crud.get_default_template(db)

    if data.charges > booking.monthly_rent:
        return error_response(message="Les charges ne peuvent pas dépasser le loyer")

    contract = Contract(
        contract_number=generate_contract_number(),
        booking=booking,
        template=template,
        monthly_rent=booking.monthly_rent,
        deposit=booking.security_deposit or 0,
        charges=data.charges,
        start_date=booking.start_date,
        end_date=data.end_date or booking.end_date,
        status=ContractStatus.DRAFT.value
    )
    db.add(contract)
    db.flush()

    render_contract(contract)
    transition(contract, ContractStatus.PENDING.value)

    db.commit()
    db.refresh(contract)
    logger.info(f"Contract {contract.contract_number} generated for booking {booking.id}")
    return contract


# ----------------- Update / Delete -----------------
def update_contract(db: Session, contract_id: str, data: ContractUpdate) -> Contract:
    contract = get_contract_or_404(db, contract_id)
    update_data = data.model_dump(exclude_unset=True)
    target_status = update_data.pop("status", None)
    if target_status is not None:
        target_status = target_status.value

    if update_data and contract.status not in (ContractStatus.DRAFT.value, ContractStatus.PENDING.value):
        return error_response(
            message="Seul un contrat non envoyé peut être modifié",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    for key, value in update_data.items():
        setattr(contract, key, value)

    if target_status and target_status != contract.status:
        transition(contract, target_status)

    if update_data:
        render_contract(contract)

    db.commit()
    db.refresh(contract)
    return contract


def delete_contract(db: Session, contract_id: str):
    contract = get_contract_or_404(db, contract_id)
    # signatures first, then the contract
    for signature in list(contract.signatures):
        db.delete(signature)
    db.delete(contract)
    db.commit()


def change_status(db: Session, contract_id: str, target: str) -> Contract:
    contract = get_contract_or_404(db, contract_id)
    transition(contract, target)
    db.commit()
    db.refresh(contract)
    return contract


# ----------------- Send -----------------
def send_contract(db: Session, contract_id: str, data: ContractSend) -> Tuple[Contract, str, bool]:
    contract = get_contract_or_404(db, contract_id)

    if contract.status not in (ContractStatus.PENDING.value, ContractStatus.SENT.value):
        return error_response(
            message="Seul un contrat généré peut être envoyé pour signature",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    tenant = contract.booking.user
    signer_email = (data.signer_email or tenant.email).strip().lower()
    signer_name = data.signer_name or tenant.full_name

    token = create_signing_token(contract.id, signer_email, signer_name, data.signer_role.value)
    signing_url = f"{settings.APP_BASE_URL.rstrip('/')}/sign-contract/{token}"

    if contract.status != ContractStatus.SENT.value:
        transition(contract, ContractStatus.SENT.value)
    db.commit()
    db.refresh(contract)

    email_sent = EmailHelper().send_email(
        recipients=[signer_email],
        subject=f"Contrat {contract.contract_number} à signer",
        html_body=get_signing_email_template(
            signer_name, contract.contract_number, signing_url, settings.SIGNING_TOKEN_EXPIRE_DAYS)
    )
    return contract, signing_url, email_sent


# ----------------- Signing -----------------
def required_signer_emails(contract: Contract) -> List[str]:
    return [contract.booking.user.email]


def has_signed(contract: Contract, email: str) -> bool:
    return any(same_email(s.signer_email, email) for s in contract.signatures)


def all_required_signed(contract: Contract) -> bool:
    return all(has_signed(contract, email) for email in required_signer_emails(contract))


def _claims_or_401(token: str) -> dict:
    try:
        return verify_signing_token(token)
    except InvalidSigningToken as e:
        logger.info(f"Rejected signing token: {e}")
        return error_response(
            message="Token de signature invalide ou expiré",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_INVALID,
            http_status=401
        )


def get_signing_session(db: Session, token: str) -> dict:
    claims = _claims_or_401(token)
    contract = get_contract_or_404(db, claims["contractId"])
    return {
        "contract": contract,
        "signatures": list(contract.signatures),
        "signer_email": claims.get("signerEmail"),
        "signer_name": claims.get("signerName"),
        "signer_role": claims.get("signerRole", SignerRole.TENANT.value),
        "already_signed": has_signed(contract, claims.get("signerEmail")),
    }


def sign_contract(db: Session, contract_id: str, data: SignContractRequest,
                  ip_address: Optional[str], user_agent: Optional[str]) -> Tuple[ContractSignature, bool, Contract]:
    claims = _claims_or_401(data.token)

    if claims.get("contractId") != contract_id:
        return error_response(
            message="Ce lien de signature ne correspond pas à ce contrat",
            status_code=AppStatusCode.AUTHENTICATION_FORBIDDEN,
            http_status=403
        )
    if not same_email(claims.get("signerEmail"), data.signer_email):
        return error_response(
            message="Ce lien de signature ne correspond pas au signataire",
            status_code=AppStatusCode.AUTHENTICATION_FORBIDDEN,
            http_status=403
        )

    signer_role = claims.get("signerRole", SignerRole.TENANT.value)
    if data.signer_role is not None and data.signer_role.value != signer_role:
        logger.warning(f"Signer {data.signer_email} sent role {data.signer_role.value} with a {signer_role} link")
        return error_response(
            message="Ce lien de signature ne correspond pas à ce rôle",
            status_code=AppStatusCode.AUTHENTICATION_FORBIDDEN,
            http_status=403
        )

    contract = get_contract_or_404(db, contract_id)

    if has_signed(contract, data.signer_email):
        return error_response(
            message="Ce contrat a déjà été signé par cette personne",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    if contract.status not in SIGNABLE_STATUSES:
        return error_response(
            message="Ce contrat ne peut plus être signé",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    signature = ContractSignature(
        signer_email=data.signer_email.strip().lower(),
        signer_name=data.signer_name,
        signer_role=signer_role,
        signature_data=data.signature_data,
        ip_address=ip_address,
        user_agent=(user_agent or "")[:500] or None,
        signed_at=datetime.utcnow()
    )
    contract.signatures.append(signature)
    db.flush()

    all_signed = all_required_signed(contract)
    if all_signed and contract.status != ContractStatus.SIGNED.value:
        transition(contract, ContractStatus.SIGNED.value)
        render_contract(contract, _signature_images(db, contract))

    db.commit()
    db.refresh(signature)
    db.refresh(contract)
    logger.info(f"Contract {contract.contract_number} signed by {signature.signer_email}")

    EmailHelper().send_email(
        recipients=[signature.signer_email],
        subject=f"Contrat {contract.contract_number} signé",
        html_body=get_contract_signed_email_template(signature.signer_name, contract.contract_number)
    )
    return signature, all_signed, contract


# ----------------- PDF -----------------
def regenerate_pdf(db: Session, contract_id: str) -> Contract:
    contract = get_contract_or_404(db, contract_id)
    if contract.status in TERMINAL_STATUSES:
        return error_response(message="Impossible de régénérer un contrat clos")

    render_contract(contract, _signature_images(db, contract))
    db.commit()
    db.refresh(contract)
    return contract


def generate_final_pdf(db: Session, contract_id: str) -> Contract:
    contract = get_contract_or_404(db, contract_id)

    admin_signature = admin_signatures_crud.get_default_signature(db)
    if not admin_signature:
        return error_response(
            message="Aucune signature admin configurée",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    if contract.status not in (ContractStatus.SIGNED.value, ContractStatus.ACTIVE.value):
        return error_response(
            message="Le contrat doit être signé avant la génération finale",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    render_contract(contract, _signature_images(db, contract))
    if contract.status == ContractStatus.SIGNED.value:
        transition(contract, ContractStatus.ACTIVE.value)

    db.commit()
    db.refresh(contract)
    return contract
