import uuid
from sqlalchemy import Column, Date, DateTime, Numeric, String, func
from sqlalchemy.orm import relationship

from shared.core.database import Base
from shared.helpers.password_helper import hash_password, verify_password
from shared.utils.enums import UserRole, UserStatus


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(200), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(30))
    birth_date = Column(Date)
    profession = Column(String(150))
    monthly_income = Column(Numeric(12, 2, asdecimal=False))
    role = Column(String(16), nullable=False, default=UserRole.PROSPECT.value)
    status = Column(String(16), nullable=False, default=UserStatus.ACTIVE.value)
    password = Column(String(255))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    bookings = relationship("Booking", back_populates="user")
    payments = relationship("Payment", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def set_password(self, password: str):
        self.password = hash_password(password)

    def verify_password(self, password: str) -> bool:
        return verify_password(password, self.password)
