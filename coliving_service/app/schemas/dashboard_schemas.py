from typing import Dict, List, Optional

from shared.core.schemas import CamelModel
from .common_schemas import PaymentBrief, UserBrief


class DashboardOverview(CamelModel):
    total_users: int
    total_rooms: int
    total_bookings: int
    active_bookings: int
    occupied_rooms: int
    available_rooms: int
    pending_payments: int
    late_payments: int
    unread_contacts: int
    occupancy_rate: float
    monthly_revenue: float


class MonthlyRevenue(CamelModel):
    month: str
    revenue: float


class DashboardTrends(CamelModel):
    new_users: int
    new_bookings: int
    new_contacts: int
    revenue_by_month: List[MonthlyRevenue]


class TopRoom(CamelModel):
    id: str
    name: str
    number: int
    bookings_count: int


class UpcomingPayment(PaymentBrief):
    user: Optional[UserBrief] = None


class RecentContact(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    subject: str
    type: str
    status: str


class DashboardDetails(CamelModel):
    top_rooms: List[TopRoom]
    upcoming_payments: List[UpcomingPayment]
    recent_contacts: List[RecentContact]


class DashboardOut(CamelModel):
    period: int
    overview: DashboardOverview
    trends: DashboardTrends
    distribution: Dict[str, Dict[str, int]]
    details: DashboardDetails
