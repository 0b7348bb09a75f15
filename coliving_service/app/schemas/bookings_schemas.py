from datetime import date
from typing import List, Optional
from pydantic import EmailStr, Field, model_validator

from shared.core.schemas import CamelInputModel, CamelModel, CommonQueryParams
from ..enum.coliving_enum import BookingStatus
from .common_schemas import PaymentBrief, RoomBrief, Timestamps, UserBrief


def _check_period(model):
    if model.end_date and model.start_date and model.end_date < model.start_date:
        raise ValueError("La date de fin doit être postérieure à la date de début")
    return model


# ----------------- Create -----------------
class BookingCreate(CamelInputModel):
    user_id: str
    room_id: str
    start_date: date
    end_date: Optional[date] = None
    monthly_rent: float = Field(gt=0)
    security_deposit: float = Field(default=0, ge=0)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_period(self):
        return _check_period(self)


# ----------------- Update -----------------
class BookingUpdate(CamelInputModel):
    status: Optional[BookingStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    monthly_rent: Optional[float] = Field(default=None, gt=0)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_period(self):
        return _check_period(self)


class BookingBulkAction(CamelInputModel):
    action: str
    booking_ids: List[str] = Field(min_length=1)
    # checked by the crud layer to answer with a domain message
    status: Optional[str] = None


# ----------------- Public reservation -----------------
class ReservationCreate(CamelInputModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    room_id: str
    start_date: date
    end_date: Optional[date] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_period(self):
        return _check_period(self)


# ----------------- Out -----------------
class BookingStats(CamelModel):
    total_paid: float
    total_due: float
    balance: float
    overdue_payments: int
    completion_rate: int


class BookingOut(Timestamps):
    id: str
    user_id: str
    room_id: str
    start_date: date
    end_date: Optional[date] = None
    monthly_rent: float
    security_deposit: float = 0
    total_amount: float
    status: str
    notes: Optional[str] = None
    user: Optional[UserBrief] = None
    room: Optional[RoomBrief] = None
    payments: List[PaymentBrief] = []
    stats: Optional[BookingStats] = None


# ----------------- Request -----------------
class BookingRequest(CommonQueryParams):
    status: Optional[str] = None
    user_id: Optional[str] = None
    room_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
