from typing import List, Optional
from pydantic import Field, field_validator

from shared.core.schemas import CamelInputModel, CamelModel, CommonQueryParams
from ..enum.coliving_enum import BedType, KitchenType, RoomStatus
from .common_schemas import BookingBrief, Timestamps, UserBrief, check_urls, is_http_url


# ----------------- Base -----------------
class RoomBase(CamelInputModel):
    name: str = Field(min_length=1)
    number: int = Field(gt=0)
    price: float = Field(gt=0)
    surface: float = Field(gt=0)
    description: str = Field(min_length=10)
    has_private_bathroom: bool = False
    has_balcony: bool = False
    has_desk: bool = True
    has_closet: bool = True
    has_window: bool = True
    floor: int = Field(default=0, ge=0)
    orientation: Optional[str] = None
    bed_type: BedType = BedType.DOUBLE
    kitchen_type: KitchenType = KitchenType.SHARED
    images: List[str] = []
    virtual_tour: Optional[str] = None
    is_virtual_tour_active: bool = False

    @field_validator("images")
    @classmethod
    def validate_images(cls, value):
        return check_urls(value)

    @field_validator("virtual_tour")
    @classmethod
    def validate_virtual_tour(cls, value):
        if value is not None and not is_http_url(value):
            raise ValueError("URL de visite virtuelle invalide")
        return value


# ----------------- Create -----------------
class RoomCreate(RoomBase):
    pass


# ----------------- Update -----------------
class RoomUpdate(CamelInputModel):
    name: Optional[str] = Field(default=None, min_length=1)
    number: Optional[int] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, gt=0)
    surface: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = Field(default=None, min_length=10)
    has_private_bathroom: Optional[bool] = None
    has_balcony: Optional[bool] = None
    has_desk: Optional[bool] = None
    has_closet: Optional[bool] = None
    has_window: Optional[bool] = None
    floor: Optional[int] = Field(default=None, ge=0)
    orientation: Optional[str] = None
    bed_type: Optional[BedType] = None
    kitchen_type: Optional[KitchenType] = None
    images: Optional[List[str]] = None
    virtual_tour: Optional[str] = None
    is_virtual_tour_active: Optional[bool] = None
    status: Optional[RoomStatus] = None
    is_active: Optional[bool] = None

    @field_validator("images")
    @classmethod
    def validate_images(cls, value):
        return check_urls(value)


# ----------------- Actions -----------------
class RoomBulkAction(CamelInputModel):
    action: str
    room_ids: List[str] = Field(min_length=1)
    status: Optional[RoomStatus] = None
    is_active: Optional[bool] = None


class RoomPatchAction(CamelInputModel):
    action: str
    virtual_tour: Optional[str] = None


# ----------------- Out -----------------
class RoomOut(Timestamps):
    id: str
    name: str
    number: int
    price: float
    surface: float
    description: str
    has_private_bathroom: bool = False
    has_balcony: bool = False
    has_desk: bool = True
    has_closet: bool = True
    has_window: bool = True
    floor: int = 0
    orientation: Optional[str] = None
    bed_type: Optional[str] = None
    kitchen_type: Optional[str] = None
    images: Optional[List[str]] = []
    virtual_tour: Optional[str] = None
    is_virtual_tour_active: bool = False
    status: str
    is_active: bool
    active_bookings: List[BookingBrief] = []


class RoomStats(CamelModel):
    total_bookings: int
    active_bookings: int
    total_revenue: float
    current_tenant: Optional[UserBrief] = None


class RoomDetailOut(RoomOut):
    stats: RoomStats


# ----------------- Request -----------------
class RoomRequest(CommonQueryParams):
    status: Optional[RoomStatus] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    has_balcony: Optional[str] = None
    floor: Optional[int] = None
