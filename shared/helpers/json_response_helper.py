from math import ceil
from typing import Any, Optional
from fastapi import HTTPException

from shared.core.schemas import JsonOutResult, Pagination
from shared.utils.app_status_code import AppStatusCode


def success_response(data: Any = None, message: Optional[str] = None, pagination: Optional[Pagination] = None):
    return JsonOutResult(
        success=True,
        data=data,
        message=message,
        pagination=pagination
    )


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=ceil(total / limit) if limit else 0
    )


def error_response(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, http_status: int = 400):
    raise HTTPException(
        status_code=http_status,
        detail={"error": message, "code": status_code}
    )


def not_found_response(message: str):
    return error_response(
        message=message,
        status_code=AppStatusCode.NOT_FOUND,
        http_status=404
    )
