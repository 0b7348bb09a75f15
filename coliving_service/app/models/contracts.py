import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from shared.core.database import Base
from ..enum.contract_enum import ContractStatus


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    contract_number = Column(String(32), unique=True, nullable=False)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, index=True)
    template_id = Column(String(36), ForeignKey("contract_templates.id", ondelete="SET NULL"))
    monthly_rent = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    deposit = Column(Numeric(10, 2, asdecimal=False), default=0)
    charges = Column(Numeric(10, 2, asdecimal=False), default=0)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    status = Column(String(16), nullable=False, default=ContractStatus.DRAFT.value)
    content = Column(Text)
    pdf_url = Column(Text)
    signed_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    booking = relationship("Booking", back_populates="contracts")
    template = relationship("ContractTemplate")
    signatures = relationship("ContractSignature", back_populates="contract",
                              cascade="all, delete-orphan",
                              order_by="ContractSignature.signed_at")
