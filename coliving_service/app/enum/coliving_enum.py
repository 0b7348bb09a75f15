from enum import Enum


class RoomStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    MAINTENANCE = "MAINTENANCE"
    UNAVAILABLE = "UNAVAILABLE"


class BedType(str, Enum):
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    QUEEN = "QUEEN"
    KING = "KING"
    BUNK = "BUNK"


class KitchenType(str, Enum):
    SHARED = "SHARED"
    KITCHENETTE = "KITCHENETTE"
    PRIVATE = "PRIVATE"


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"
    CANCELLED = "CANCELLED"


# bookings that hold a room
BLOCKING_BOOKING_STATUSES = (BookingStatus.ACTIVE.value, BookingStatus.CONFIRMED.value)
# bookings that can be removed
CLOSED_BOOKING_STATUSES = (BookingStatus.CANCELLED.value, BookingStatus.ENDED.value)


class PaymentType(str, Enum):
    RENT = "RENT"
    SECURITY_DEPOSIT = "SECURITY_DEPOSIT"
    CHARGES = "CHARGES"
    FEES = "FEES"
    OTHER = "OTHER"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    LATE = "LATE"
    CANCELLED = "CANCELLED"


class ContactType(str, Enum):
    QUESTION = "QUESTION"
    VISIT_REQUEST = "VISIT_REQUEST"
    BOOKING_REQUEST = "BOOKING_REQUEST"
    COMPLAINT = "COMPLAINT"
    VISIT = "VISIT"
    INFORMATION = "INFORMATION"
    MAINTENANCE = "MAINTENANCE"
    BOOKING = "BOOKING"
    OTHER = "OTHER"


class ContactStatus(str, Enum):
    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"
