from typing import Any, Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

# Shared properties
T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for API payloads: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CamelInputModel(EmptyStringModel):
    """Request bodies: camelCase aliases plus empty-string cleanup."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserToken(BaseModel):
    user_id: str
    email: str
    role: str
    name: Optional[str] = None
    status: Optional[str] = None
    exp: Optional[int] = None


class CommonQueryParams(BaseModel):
    page: int = 1
    limit: int = 10

    @property
    def skip(self) -> int:
        return (max(self.page, 1) - 1) * self.limit


class Lookup(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class Issue(BaseModel):
    path: List[Any]
    message: str
    type: str


class JsonOutResult(CamelModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None
    code: Optional[str] = None
    issues: Optional[List[Issue]] = None
    pagination: Optional[Pagination] = None


class ActionResult(CamelModel):
    count: int
