import logging
from datetime import date
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from shared.helpers.json_response_helper import not_found_response
from ..enum.coliving_enum import PaymentStatus
from ..models.bookings import Booking
from ..models.payments import Payment
from ..schemas.payments_schemas import PaymentCreate, PaymentRequest, PaymentStatusUpdate

logger = logging.getLogger(__name__)


def mark_overdue_payments(db: Session, today: date = None) -> int:
    """PENDING payments past their due date become LATE."""
    today = today or date.today()
    count = db.query(Payment).filter(
        Payment.status == PaymentStatus.PENDING.value,
        Payment.due_date < today
    ).update({Payment.status: PaymentStatus.LATE.value}, synchronize_session=False)
    if count:
        db.commit()
        logger.info(f"{count} payment(s) marked as late")
    return count


def build_payment_filters(params: PaymentRequest):
    filters = []

    if params.status and params.status.lower() != "all":
        filters.append(Payment.status == params.status.upper())

    if params.type and params.type.lower() != "all":
        filters.append(Payment.type == params.type.upper())

    if params.booking_id:
        filters.append(Payment.booking_id == params.booking_id)

    if params.user_id:
        filters.append(Payment.user_id == params.user_id)

    return filters


# ----------------- Get All Payments -----------------
def get_payments(db: Session, params: PaymentRequest) -> Tuple[List[Payment], int]:
    mark_overdue_payments(db)

    base_query = db.query(Payment).filter(*build_payment_filters(params))
    total = base_query.with_entities(func.count(Payment.id)).scalar() or 0

    payments = (
        base_query
        .options(joinedload(Payment.user))
        .order_by(Payment.due_date.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return payments, total


# ----------------- Create Payment -----------------
def create_payment(db: Session, data: PaymentCreate) -> Payment:
    booking = db.query(Booking).filter(Booking.id == data.booking_id).first()
    if not booking:
        return not_found_response("Réservation non trouvée")

    payment = Payment(
        booking_id=booking.id,
        user_id=booking.user_id,
        amount=data.amount,
        type=data.type.value,
        status=PaymentStatus.PENDING.value,
        due_date=data.due_date,
        description=data.description
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment


# ----------------- Update Payment Status -----------------
def update_payment_status(db: Session, data: PaymentStatusUpdate) -> Payment:
    payment = db.query(Payment).filter(Payment.id == data.id).first()
    if not payment:
        return not_found_response("Paiement non trouvé")

    payment.status = data.status.value
    if data.status == PaymentStatus.PAID:
        payment.paid_date = data.paid_date or date.today()
    else:
        payment.paid_date = None

    db.commit()
    db.refresh(payment)
    return payment
