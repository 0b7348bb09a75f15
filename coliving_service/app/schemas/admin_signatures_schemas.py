from typing import Optional
from pydantic import Field, field_validator

from shared.core.schemas import CamelInputModel
from ..services.signature_pad import check_signature_image
from .common_schemas import Timestamps


class AdminSignatureCreate(CamelInputModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    signature_data: str
    is_default: bool = False

    @field_validator("signature_data")
    @classmethod
    def validate_signature(cls, value):
        return check_signature_image(value)


class AdminSignatureUpdate(CamelInputModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    signature_data: Optional[str] = None
    is_default: Optional[bool] = None

    @field_validator("signature_data")
    @classmethod
    def validate_signature(cls, value):
        return check_signature_image(value)


class AdminSignatureOut(Timestamps):
    id: str
    name: str
    description: Optional[str] = None
    signature_data: str
    is_default: bool
    created_by_id: Optional[str] = None
