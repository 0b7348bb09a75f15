import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship

from shared.core.database import Base


class ContractSignature(Base):
    __tablename__ = "contract_signatures"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    contract_id = Column(String(36), ForeignKey("contracts.id"), nullable=False, index=True)
    signer_email = Column(String(200), nullable=False)
    signer_name = Column(String(200), nullable=False)
    signer_role = Column(String(16), nullable=False)
    signature_data = Column(Text, nullable=False)
    ip_address = Column(String(64))
    user_agent = Column(String(500))
    signed_at = Column(DateTime, server_default=func.now())

    contract = relationship("Contract", back_populates="signatures")
