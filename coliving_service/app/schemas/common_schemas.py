from datetime import date, datetime
from typing import List, Optional
from urllib.parse import urlparse

from shared.core.schemas import CamelModel


def is_http_url(value: str) -> bool:
    parsed = urlparse(value or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def check_urls(values: Optional[List[str]]) -> Optional[List[str]]:
    for value in values or []:
        if not is_http_url(value):
            raise ValueError(f"URL invalide : {value}")
    return values


class UserBrief(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


class RoomBrief(CamelModel):
    id: str
    name: str
    number: int
    price: float
    status: str


class PaymentBrief(CamelModel):
    id: str
    amount: float
    type: str
    status: str
    due_date: date
    paid_date: Optional[date] = None


class BookingBrief(CamelModel):
    id: str
    start_date: date
    end_date: Optional[date] = None
    monthly_rent: float
    status: str
    user: Optional[UserBrief] = None


class Timestamps(CamelModel):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
