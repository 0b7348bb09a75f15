import logging
from datetime import datetime
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found_response
from ..enum.coliving_enum import ContactStatus
from ..models.contacts import Contact
from ..schemas.contacts_schemas import ContactCreate, ContactRequest, ContactUpdate

logger = logging.getLogger(__name__)


def create_contact(db: Session, data: ContactCreate) -> Contact:
    contact = Contact(
        **data.model_dump(mode="json"),
        status=ContactStatus.NEW.value,
        is_read=False
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    logger.info(f"New {contact.type} contact message from {contact.email}")
    return contact


def build_contact_filters(params: ContactRequest):
    filters = []

    if params.status and params.status.lower() != "all":
        filters.append(Contact.status == params.status.upper())

    if params.email:
        filters.append(Contact.email.ilike(f"%{params.email}%"))

    if params.is_read is not None:
        filters.append(Contact.is_read.is_(params.is_read))

    return filters


def get_contacts(db: Session, params: ContactRequest) -> Tuple[List[Contact], int]:
    base_query = db.query(Contact).filter(*build_contact_filters(params))
    total = base_query.with_entities(func.count(Contact.id)).scalar() or 0

    contacts = (
        base_query
        .order_by(Contact.created_at.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return contacts, total


def update_contact(db: Session, contact_id: str, data: ContactUpdate, current_user: UserToken) -> Contact:
    contact = db.query(Contact).filter(Contact.id == contact_id).first()
    if not contact:
        return not_found_response("Contact non trouvé")

    update_data = data.model_dump(exclude_unset=True, mode="json")
    for key, value in update_data.items():
        setattr(contact, key, value)

    if update_data.get("admin_response"):
        contact.responded_at = datetime.utcnow()
        contact.responded_by = current_user.user_id
        contact.is_read = True
        if "status" not in update_data:
            contact.status = ContactStatus.RESOLVED.value

    db.commit()
    db.refresh(contact)
    return contact


def delete_contact(db: Session, contact_id: str):
    contact = db.query(Contact).filter(Contact.id == contact_id).first()
    if not contact:
        return not_found_response("Contact non trouvé")
    db.delete(contact)
    db.commit()
