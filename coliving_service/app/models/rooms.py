import uuid
from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from shared.core.database import Base
from ..enum.coliving_enum import BedType, KitchenType, RoomStatus


class Room(Base):
    __tablename__ = "rooms"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(120), nullable=False)
    number = Column(Integer, unique=True, index=True, nullable=False)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    surface = Column(Numeric(8, 2, asdecimal=False), nullable=False)
    description = Column(Text, nullable=False)
    has_private_bathroom = Column(Boolean, default=False)
    has_balcony = Column(Boolean, default=False)
    has_desk = Column(Boolean, default=True)
    has_closet = Column(Boolean, default=True)
    has_window = Column(Boolean, default=True)
    floor = Column(Integer, default=0)
    orientation = Column(String(32))
    bed_type = Column(String(16), default=BedType.DOUBLE.value)
    kitchen_type = Column(String(16), default=KitchenType.SHARED.value)
    images = Column(JSON, default=list)
    virtual_tour = Column(String(500))
    is_virtual_tour_active = Column(Boolean, default=False)
    status = Column(String(16), nullable=False, default=RoomStatus.AVAILABLE.value)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    bookings = relationship("Booking", back_populates="room")
