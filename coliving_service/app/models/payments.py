import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from shared.core.database import Base
from ..enum.coliving_enum import PaymentStatus


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    type = Column(String(24), nullable=False)
    status = Column(String(16), nullable=False, default=PaymentStatus.PENDING.value)
    due_date = Column(Date, nullable=False)
    paid_date = Column(Date)
    description = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    booking = relationship("Booking", back_populates="payments")
    user = relationship("User", back_populates="payments")
