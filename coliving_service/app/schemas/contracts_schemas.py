from datetime import date, datetime
from typing import List, Optional
from pydantic import EmailStr, Field, field_validator

from shared.core.schemas import CamelInputModel, CamelModel, CommonQueryParams
from ..enum.contract_enum import ContractStatus, SignerRole
from ..services.signature_pad import check_signature_image
from .common_schemas import BookingBrief, RoomBrief, Timestamps


class ContractGenerate(CamelInputModel):
    booking_id: str
    template_id: Optional[str] = None
    charges: float = Field(default=0, ge=0)
    end_date: Optional[date] = None


class ContractUpdate(CamelInputModel):
    monthly_rent: Optional[float] = Field(default=None, gt=0)
    deposit: Optional[float] = Field(default=None, ge=0)
    charges: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[ContractStatus] = None


class ContractSend(CamelInputModel):
    signer_email: Optional[EmailStr] = None
    signer_name: Optional[str] = None
    signer_role: SignerRole = SignerRole.TENANT


class SignContractRequest(CamelInputModel):
    token: str
    signature_data: str = Field(min_length=1)
    signer_name: str = Field(min_length=1)
    signer_email: EmailStr
    # must match the role the signing link was issued for
    signer_role: Optional[SignerRole] = None

    @field_validator("signature_data")
    @classmethod
    def validate_signature(cls, value):
        return check_signature_image(value)


class SignatureOut(CamelModel):
    id: str
    contract_id: str
    signer_email: str
    signer_name: str
    signer_role: str
    signature_data: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    signed_at: Optional[datetime] = None


class ContractOut(Timestamps):
    id: str
    contract_number: str
    booking_id: str
    template_id: Optional[str] = None
    monthly_rent: float
    deposit: float = 0
    charges: float = 0
    start_date: date
    end_date: Optional[date] = None
    status: str
    content: Optional[str] = None
    pdf_url: Optional[str] = None
    signed_at: Optional[datetime] = None
    booking: Optional[BookingBrief] = None
    signatures: List[SignatureOut] = []


class ContractSummaryOut(ContractOut):
    room: Optional[RoomBrief] = None


class SendContractOut(CamelModel):
    contract: ContractOut
    signing_url: str
    email_sent: bool


class SignContractOut(CamelModel):
    signature: SignatureOut
    all_signed: bool
    contract_status: str


class SigningSessionOut(CamelModel):
    contract: ContractOut
    signatures: List[SignatureOut]
    signer_email: str
    signer_name: Optional[str] = None
    signer_role: str
    already_signed: bool


class ContractRequest(CommonQueryParams):
    status: Optional[str] = None
    booking_id: Optional[str] = None
