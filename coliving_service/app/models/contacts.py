import uuid
from sqlalchemy import Boolean, Column, DateTime, String, Text, func

from shared.core.database import Base
from ..enum.coliving_enum import ContactStatus, ContactType


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(200), nullable=False, index=True)
    phone = Column(String(30))
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(24), nullable=False, default=ContactType.QUESTION.value)
    status = Column(String(16), nullable=False, default=ContactStatus.NEW.value)
    is_read = Column(Boolean, default=False)
    admin_response = Column(Text)
    responded_at = Column(DateTime)
    responded_by = Column(String(36))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
