import logging
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.core.schemas import Issue, JsonOutResult
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)

INVALID_DATA_MESSAGE = "Données invalides"
INTERNAL_ERROR_MESSAGE = "Erreur interne du serveur"


def _failure(status_code: int, error: str, code: str = None, issues=None) -> JSONResponse:
    wrapped = JsonOutResult(
        success=False,
        error=error,
        code=code,
        issues=issues
    ).model_dump(by_alias=True, exclude_none=True)
    return JSONResponse(content=wrapped, status_code=status_code)


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(StarletteHTTPException)
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        if isinstance(detail, dict):
            return _failure(exc.status_code or 400, str(detail.get("error")), detail.get("code"))
        return _failure(exc.status_code or 400, str(detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        issues = [
            Issue(
                path=[p for p in err.get("loc", ()) if p != "body"],
                message=err.get("msg", ""),
                type=err.get("type", "")
            )
            for err in exc.errors()
        ]
        logger.info("Rejected invalid payload on %s: %d issue(s)",
                    request.url.path, len(issues))
        return _failure(400, INVALID_DATA_MESSAGE, AppStatusCode.INVALID_INPUT, issues)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s",
                         request.method, request.url.path)
        return _failure(500, INTERNAL_ERROR_MESSAGE, AppStatusCode.OPERATION_FAILED)
