import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from shared.core.database import Base
from ..enum.coliving_enum import BookingStatus


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    room_id = Column(String(36), ForeignKey("rooms.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    monthly_rent = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    security_deposit = Column(Numeric(10, 2, asdecimal=False), default=0)
    total_amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    status = Column(String(16), nullable=False, default=BookingStatus.PENDING.value)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="bookings")
    room = relationship("Room", back_populates="bookings")
    payments = relationship("Payment", back_populates="booking",
                            cascade="all, delete-orphan", order_by="Payment.due_date")
    contracts = relationship("Contract", back_populates="booking",
                             cascade="all, delete-orphan")
