import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found_response
from ..models.admin_signatures import AdminSignature
from ..schemas.admin_signatures_schemas import AdminSignatureCreate, AdminSignatureUpdate

logger = logging.getLogger(__name__)


def clear_default_signatures(db: Session, keep_id: Optional[str] = None):
    query = db.query(AdminSignature).filter(AdminSignature.is_default.is_(True))
    if keep_id:
        query = query.filter(AdminSignature.id != keep_id)
    query.update({AdminSignature.is_default: False}, synchronize_session=False)


def get_signatures(db: Session) -> List[AdminSignature]:
    return db.query(AdminSignature).order_by(
        AdminSignature.is_default.desc(), AdminSignature.created_at.desc()).all()


def get_default_signature(db: Session) -> Optional[AdminSignature]:
    return (
        db.query(AdminSignature)
        .filter(AdminSignature.is_default.is_(True))
        .order_by(AdminSignature.updated_at.desc())
        .first()
    )


def get_signature_or_404(db: Session, signature_id: str) -> AdminSignature:
    signature = db.query(AdminSignature).filter(AdminSignature.id == signature_id).first()
    if not signature:
        return not_found_response("Signature introuvable")
    return signature


def create_signature(db: Session, data: AdminSignatureCreate, current_user: UserToken) -> AdminSignature:
    signature = AdminSignature(
        **data.model_dump(),
        created_by_id=current_user.user_id
    )
    db.add(signature)
    db.flush()

    if data.is_default:
        clear_default_signatures(db, keep_id=signature.id)

    db.commit()
    db.refresh(signature)
    return signature


def update_signature(db: Session, signature_id: str, data: AdminSignatureUpdate) -> AdminSignature:
    signature = get_signature_or_404(db, signature_id)
    update_data = data.model_dump(exclude_unset=True)

    for key, value in update_data.items():
        if value is not None:
            setattr(signature, key, value)

    if update_data.get("is_default"):
        clear_default_signatures(db, keep_id=signature.id)

    db.commit()
    db.refresh(signature)
    return signature


def delete_signature(db: Session, signature_id: str):
    signature = get_signature_or_404(db, signature_id)
    db.delete(signature)
    db.commit()
    logger.info(f"Admin signature {signature_id} deleted")
