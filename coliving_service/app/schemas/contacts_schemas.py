from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field

from shared.core.schemas import CamelInputModel, CommonQueryParams
from ..enum.coliving_enum import ContactStatus, ContactType
from .common_schemas import Timestamps


class ContactCreate(CamelInputModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    subject: str = Field(min_length=1)
    message: str = Field(min_length=10)
    type: ContactType = ContactType.QUESTION


class ContactUpdate(CamelInputModel):
    status: Optional[ContactStatus] = None
    admin_response: Optional[str] = None
    is_read: Optional[bool] = None


class ContactOut(Timestamps):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    type: str
    status: str
    is_read: bool = False
    admin_response: Optional[str] = None
    responded_at: Optional[datetime] = None
    responded_by: Optional[str] = None


class ContactRequest(CommonQueryParams):
    limit: int = 50
    status: Optional[str] = None
    email: Optional[str] = None
    is_read: Optional[bool] = None
