from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_staff
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult
from shared.helpers.json_response_helper import build_pagination, success_response
from ..crud import payments_crud as crud
from ..schemas.payments_schemas import PaymentCreate, PaymentOut, PaymentRequest, PaymentStatusUpdate

router = APIRouter(
    prefix="/api/payments",
    tags=["Payments"],
    dependencies=[Depends(require_staff)]
)


@router.get("", response_model=JsonOutResult[List[PaymentOut]])
def get_payments(
    status: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    booking_id: Optional[str] = Query(None, alias="bookingId"),
    user_id: Optional[str] = Query(None, alias="userId"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    params = PaymentRequest(status=status, type=type, booking_id=booking_id,
                            user_id=user_id, page=page, limit=limit)
    payments, total = crud.get_payments(db, params)
    return success_response(
        data=[PaymentOut.model_validate(p) for p in payments],
        pagination=build_pagination(page, limit, total)
    )


@router.post("", response_model=JsonOutResult[PaymentOut], status_code=201)
def create_payment(data: PaymentCreate, db: Session = Depends(get_db)):
    payment = crud.create_payment(db, data)
    return success_response(data=PaymentOut.model_validate(payment), message="Paiement enregistré")


@router.put("", response_model=JsonOutResult[PaymentOut])
def update_payment_status(data: PaymentStatusUpdate, db: Session = Depends(get_db)):
    payment = crud.update_payment_status(db, data)
    return success_response(data=PaymentOut.model_validate(payment), message="Paiement mis à jour")
