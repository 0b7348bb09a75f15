from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from shared.models.users import User
from ..enum.coliving_enum import BookingStatus, ContactStatus, PaymentStatus, PaymentType, RoomStatus
from ..models.bookings import Booking
from ..models.contacts import Contact
from ..models.payments import Payment
from ..models.rooms import Room
from ..schemas.dashboard_schemas import (
    DashboardDetails, DashboardOut, DashboardOverview, DashboardTrends, MonthlyRevenue,
    RecentContact, TopRoom, UpcomingPayment)

REVENUE_MONTHS = 12
UPCOMING_DAYS = 7


def _count(db: Session, column, *filters) -> int:
    return db.query(func.count(column)).filter(*filters).scalar() or 0


def _group_counts(db: Session, column) -> dict:
    rows = db.query(column, func.count()).group_by(column).all()
    return {str(key): int(count) for key, count in rows if key is not None}


def _paid_rent(db: Session, start: date, end: date = None) -> float:
    filters = [
        Payment.status == PaymentStatus.PAID.value,
        Payment.type == PaymentType.RENT.value,
        Payment.paid_date >= start,
    ]
    if end:
        filters.append(Payment.paid_date < end)
    return float(db.query(func.coalesce(func.sum(Payment.amount), 0)).filter(*filters).scalar() or 0)


def get_overview(db: Session, start_date: date) -> DashboardOverview:
    total_rooms = _count(db, Room.id)
    occupied_rooms = _count(db, Room.id, Room.status == RoomStatus.OCCUPIED.value)

    return DashboardOverview(
        total_users=_count(db, User.id),
        total_rooms=total_rooms,
        total_bookings=_count(db, Booking.id),
        active_bookings=_count(db, Booking.id, Booking.status == BookingStatus.ACTIVE.value),
        occupied_rooms=occupied_rooms,
        available_rooms=_count(db, Room.id, Room.status == RoomStatus.AVAILABLE.value),
        pending_payments=_count(db, Payment.id, Payment.status == PaymentStatus.PENDING.value),
        late_payments=_count(db, Payment.id, Payment.status == PaymentStatus.LATE.value),
        unread_contacts=_count(db, Contact.id, Contact.is_read.is_(False)),
        occupancy_rate=round(occupied_rooms / total_rooms * 100, 1) if total_rooms else 0,
        monthly_revenue=_paid_rent(db, start_date)
    )


def get_trends(db: Session, since: datetime, today: date) -> DashboardTrends:
    first_month = today.replace(day=1) - relativedelta(months=REVENUE_MONTHS - 1)
    revenue = []
    for i in range(REVENUE_MONTHS):
        month_start = first_month + relativedelta(months=i)
        month_end = month_start + relativedelta(months=1)
        revenue.append(MonthlyRevenue(
            month=month_start.strftime("%Y-%m"),
            revenue=_paid_rent(db, month_start, month_end)
        ))

    return DashboardTrends(
        new_users=_count(db, User.id, User.created_at >= since),
        new_bookings=_count(db, Booking.id, Booking.created_at >= since),
        new_contacts=_count(db, Contact.id, Contact.created_at >= since),
        revenue_by_month=revenue
    )


def get_details(db: Session, today: date) -> DashboardDetails:
    bookings_count = func.count(Booking.id).label("bookings_count")
    top_rooms = (
        db.query(Room.id, Room.name, Room.number, bookings_count)
        .outerjoin(Booking, Booking.room_id == Room.id)
        .group_by(Room.id, Room.name, Room.number)
        .order_by(bookings_count.desc(), Room.number.asc())
        .limit(5)
        .all()
    )

    upcoming = (
        db.query(Payment)
        .options(joinedload(Payment.user))
        .filter(
            Payment.status == PaymentStatus.PENDING.value,
            Payment.due_date >= today,
            Payment.due_date <= today + timedelta(days=UPCOMING_DAYS)
        )
        .order_by(Payment.due_date.asc())
        .limit(10)
        .all()
    )

    contacts = (
        db.query(Contact)
        .filter(Contact.status == ContactStatus.NEW.value)
        .order_by(Contact.created_at.desc())
        .limit(5)
        .all()
    )

    return DashboardDetails(
        top_rooms=[TopRoom(id=r.id, name=r.name, number=r.number, bookings_count=r.bookings_count)
                   for r in top_rooms],
        upcoming_payments=[UpcomingPayment.model_validate(p) for p in upcoming],
        recent_contacts=[RecentContact.model_validate(c) for c in contacts]
    )


def get_dashboard(db: Session, period: int = 30) -> DashboardOut:
    today = date.today()
    start_date = today - timedelta(days=period)
    since = datetime.combine(start_date, datetime.min.time())

    return DashboardOut(
        period=period,
        overview=get_overview(db, start_date),
        trends=get_trends(db, since, today),
        distribution={
            "usersByRole": _group_counts(db, User.role),
            "bookingsByStatus": _group_counts(db, Booking.status),
            "roomsByStatus": _group_counts(db, Room.status),
            "paymentsByStatus": _group_counts(db, Payment.status),
        },
        details=get_details(db, today)
    )
