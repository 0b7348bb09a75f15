import json
import logging
from typing import Callable
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.responses import JSONResponse
from fastapi import Request

from shared.core.schemas import JsonOutResult

logger = logging.getLogger(__name__)


def _is_envelope(data) -> bool:
    return isinstance(data, dict) and "success" in data


class JsonResponseMiddleware(BaseHTTPMiddleware):
    """Wraps every JSON body into the {success, data, ...} envelope."""

    async def dispatch(self, request: Request, call_next: Callable):
        # Skip docs/openapi endpoints
        if request.url.path.startswith(("/openapi", "/docs", "/redoc")):
            return await call_next(request)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled exception on %s %s",
                             request.method, request.url.path)
            wrapped_error = JsonOutResult(
                success=False,
                error="Erreur interne du serveur"
            ).model_dump(by_alias=True, exclude_none=True)
            return JSONResponse(content=wrapped_error, status_code=500)

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            return response

        # Read the full body
        body_bytes = b""
        async for chunk in response.body_iterator:
            body_bytes += chunk

        headers = {k: v for k, v in response.headers.items()
                   if k.lower() != "content-length"}

        try:
            data = json.loads(body_bytes.decode("utf-8")) if body_bytes else None
        except ValueError:
            logger.warning("Non JSON body returned with JSON content type on %s",
                           request.url.path)
            return JSONResponse(content=None, status_code=response.status_code, headers=headers)

        # Skip wrapping if already wrapped
        if _is_envelope(data):
            return JSONResponse(content=data, status_code=response.status_code, headers=headers)

        if not (200 <= response.status_code < 400):
            message = ""
            if isinstance(data, dict):
                message = data.get("detail") or data.get("message") or ""
            elif isinstance(data, str):
                message = data
            wrapped = JsonOutResult(
                success=False,
                error=str(message) or "Une erreur inattendue est survenue"
            ).model_dump(by_alias=True, exclude_none=True)
        else:
            wrapped = {"success": True, "data": data}

        return JSONResponse(content=wrapped, status_code=response.status_code, headers=headers)
