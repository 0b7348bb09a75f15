from enum import Enum


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    RESIDENT = "RESIDENT"
    PROSPECT = "PROSPECT"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"
    SUSPENDED = "SUSPENDED"


STAFF_ROLES = (UserRole.ADMIN.value, UserRole.MANAGER.value)
