from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from shared.core.schemas import CamelInputModel, CamelModel
from .common_schemas import Timestamps, UserBrief


class ContractTemplateCreate(CamelInputModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    is_default: bool = False
    pdf_data: str = Field(min_length=1)


class ContractTemplateUpdate(CamelInputModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    is_default: Optional[bool] = None
    pdf_data: Optional[str] = Field(default=None, min_length=1)


class ContractTemplateOut(Timestamps):
    id: str
    name: str
    description: Optional[str] = None
    is_default: bool
    pdf_data: str
    created_by_id: Optional[str] = None
    created_by: Optional[UserBrief] = None


class TemplateVariable(BaseModel):
    key: str
    label: str
    token: str


class TemplatePreviewRequest(CamelInputModel):
    pdf_data: Optional[str] = None
    template_id: Optional[str] = None
    booking_id: Optional[str] = None
    context: Dict[str, str] = {}

    @model_validator(mode="after")
    def check_source(self):
        if not self.pdf_data and not self.template_id:
            raise ValueError("Contenu ou template requis")
        return self


class TemplatePreviewOut(CamelModel):
    content: str
    tokens: List[str]
    unresolved_tokens: List[str]
    unknown_tokens: List[str]


class EditorCommandRequest(BaseModel):
    # raw content: whitespace matters for caret positions
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: str = ""
    command: str
    selection_start: int = Field(default=0, ge=0)
    selection_end: int = Field(default=0, ge=0)
    value: Optional[str] = None


class EditorCommandOut(CamelModel):
    content: str
    selection_start: int
    selection_end: int
