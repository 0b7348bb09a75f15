from datetime import date
from typing import Optional
from pydantic import EmailStr, Field

from shared.core.schemas import CamelInputModel, CamelModel, CommonQueryParams
from shared.utils.enums import UserRole, UserStatus
from .common_schemas import Timestamps


class UserCreate(CamelInputModel):
    email: EmailStr
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    profession: Optional[str] = None
    monthly_income: Optional[float] = Field(default=None, ge=0)
    role: UserRole = UserRole.PROSPECT
    status: UserStatus = UserStatus.ACTIVE


class UserUpdate(CamelInputModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    profession: Optional[str] = None
    monthly_income: Optional[float] = Field(default=None, ge=0)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class UserOut(Timestamps):
    id: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    profession: Optional[str] = None
    monthly_income: Optional[float] = None
    role: str
    status: str
    bookings_count: int = 0


class UserRequest(CommonQueryParams):
    limit: int = 20
    role: Optional[str] = None
    status: Optional[str] = None
    search: Optional[str] = None


class LoginRequest(CamelInputModel):
    email: EmailStr
    password: str = Field(min_length=1)


class LoginOut(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class ChangePasswordRequest(CamelInputModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)


class ForgotPasswordRequest(CamelInputModel):
    email: EmailStr


class ResetPasswordRequest(CamelInputModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=8)


class ResetTokenOut(CamelModel):
    valid: bool = True
    email: str
