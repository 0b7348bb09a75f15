from datetime import date
from typing import Optional
from pydantic import Field

from shared.core.schemas import CamelInputModel, CommonQueryParams
from ..enum.coliving_enum import PaymentStatus, PaymentType
from .common_schemas import Timestamps, UserBrief


class PaymentCreate(CamelInputModel):
    booking_id: str
    amount: float = Field(gt=0)
    type: PaymentType = PaymentType.RENT
    due_date: date
    description: Optional[str] = None


class PaymentStatusUpdate(CamelInputModel):
    id: str
    status: PaymentStatus
    paid_date: Optional[date] = None


class PaymentOut(Timestamps):
    id: str
    booking_id: str
    user_id: str
    amount: float
    type: str
    status: str
    due_date: date
    paid_date: Optional[date] = None
    description: Optional[str] = None
    user: Optional[UserBrief] = None


class PaymentRequest(CommonQueryParams):
    status: Optional[str] = None
    type: Optional[str] = None
    booking_id: Optional[str] = None
    user_id: Optional[str] = None
