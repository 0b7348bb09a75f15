import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from shared.core.config import settings
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ..models.bookings import Booking
from ..models.contract_templates import ContractTemplate
from ..models.contracts import Contract
from ..schemas.contract_templates_schemas import (
    ContractTemplateCreate, ContractTemplateUpdate, TemplatePreviewOut, TemplatePreviewRequest, TemplateVariable)
from ..services import contract_template_engine as engine
from ..services.contract_pdf import is_pdf_data_url

logger = logging.getLogger(__name__)

REQUIRED_TEMPLATE_FIELDS = ("name", "pdf_data", "is_default")


def clear_default_templates(db: Session, keep_id: Optional[str] = None):
    query = db.query(ContractTemplate).filter(ContractTemplate.is_default.is_(True))
    if keep_id:
        query = query.filter(ContractTemplate.id != keep_id)
    query.update({ContractTemplate.is_default: False}, synchronize_session=False)


def get_template_or_404(db: Session, template_id: str) -> ContractTemplate:
    template = (
        db.query(ContractTemplate)
        .options(joinedload(ContractTemplate.created_by))
        .filter(ContractTemplate.id == template_id)
        .first()
    )
    if not template:
        return not_found_response("Template introuvable")
    return template


def get_default_template(db: Session) -> Optional[ContractTemplate]:
    return (
        db.query(ContractTemplate)
        .filter(ContractTemplate.is_default.is_(True))
        .order_by(ContractTemplate.updated_at.desc())
        .first()
    )


def get_templates(db: Session) -> List[ContractTemplate]:
    return (
        db.query(ContractTemplate)
        .options(joinedload(ContractTemplate.created_by))
        .order_by(ContractTemplate.created_at.desc())
        .all()
    )


# ----------------- Create Template -----------------
def create_template(db: Session, data: ContractTemplateCreate, current_user: UserToken) -> ContractTemplate:
    template = ContractTemplate(
        name=data.name,
        description=data.description,
        is_default=data.is_default,
        pdf_data=data.pdf_data,
        created_by_id=current_user.user_id
    )
    db.add(template)
    db.flush()

    # previous default is dropped in the same transaction
    if data.is_default:
        clear_default_templates(db, keep_id=template.id)

    _log_unknown_tokens(template)
    db.commit()
    db.refresh(template)
    return template


# ----------------- Update Template -----------------
def update_template(db: Session, template_id: str, data: ContractTemplateUpdate) -> ContractTemplate:
    template = get_template_or_404(db, template_id)
    update_data = data.model_dump(exclude_unset=True)

    for key, value in update_data.items():
        # null is only meaningful for optional columns
        if value is None and key in REQUIRED_TEMPLATE_FIELDS:
            continue
        setattr(template, key, value)

    if update_data.get("is_default"):
        clear_default_templates(db, keep_id=template.id)

    _log_unknown_tokens(template)
    db.commit()
    db.refresh(template)
    return template


def set_default_template(db: Session, template_id: str) -> ContractTemplate:
    template = get_template_or_404(db, template_id)
    clear_default_templates(db, keep_id=template.id)
    template.is_default = True
    db.commit()
    db.refresh(template)
    logger.info(f"Contract template {template.id} is now the default")
    return template


# ----------------- Delete Template -----------------
def delete_template(db: Session, template_id: str):
    template = get_template_or_404(db, template_id)

    others = db.query(func.count(ContractTemplate.id)).filter(
        ContractTemplate.id != template.id).scalar() or 0
    if template.is_default and others > 0:
        return error_response(
            message="Impossible de supprimer le template par défaut",
            status_code=AppStatusCode.BUSINESS_RULE_VIOLATION
        )

    # generated contracts keep their content
    db.query(Contract).filter(Contract.template_id == template.id).update(
        {Contract.template_id: None}, synchronize_session=False)
    db.delete(template)
    db.commit()


def _log_unknown_tokens(template: ContractTemplate):
    if is_pdf_data_url(template.pdf_data):
        return
    unknown = engine.unknown_tokens(template.pdf_data)
    if unknown:
        logger.warning(f"Template '{template.name}' uses unknown tokens: {', '.join(unknown)}")


# ----------------- Variables & Preview -----------------
def get_template_variables() -> dict:
    return {
        category: [
            TemplateVariable(key=var["key"], label=var["label"], token="{{" + var["key"] + "}}")
            for var in variables
        ]
        for category, variables in engine.TEMPLATE_VARIABLES.items()
    }


def preview_template(db: Session, data: TemplatePreviewRequest) -> TemplatePreviewOut:
    body = data.pdf_data
    if not body:
        body = get_template_or_404(db, data.template_id).pdf_data

    if is_pdf_data_url(body):
        return error_response(message="Aperçu indisponible pour un PDF importé")

    context = {}
    if data.booking_id:
        booking = db.query(Booking).filter(Booking.id == data.booking_id).first()
        if not booking:
            return not_found_response("Réservation non trouvée")
        # preview uses the booking figures as if a contract existed
        preview_contract = Contract(
            monthly_rent=booking.monthly_rent,
            deposit=booking.security_deposit,
            charges=0,
            start_date=booking.start_date,
            end_date=booking.end_date
        )
        context = engine.build_contract_context(preview_contract, booking, settings)
    context.update(data.context)

    sanitized = engine.sanitize_markup(body)
    return TemplatePreviewOut(
        content=engine.render(body, context),
        tokens=engine.find_tokens(sanitized),
        unresolved_tokens=engine.unresolved_tokens(sanitized, context),
        unknown_tokens=engine.unknown_tokens(sanitized)
    )
