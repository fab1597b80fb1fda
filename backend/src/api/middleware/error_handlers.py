"""FastAPI exception handlers aligned with the storage HTTP contract."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES: Dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "Invalid request payload",
    status.HTTP_404_NOT_FOUND: "Not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Internal server error",
}


def error_body(status_code: int, detail: Any = None) -> Dict[str, Any]:
    """
    Build ``{"error": message}``.

    A dict ``detail`` may carry its own ``error`` message; anything else in
    it is passed through under ``detail``.
    """
    default = DEFAULT_MESSAGES.get(status_code, DEFAULT_MESSAGES[500])
    extra: Optional[Any] = None
    if isinstance(detail, dict):
        message = detail.get("error") or default
        extra = {k: v for k, v in detail.items() if k != "error"} or None
    elif isinstance(detail, str) and detail:
        message = detail
    else:
        message = default

    body: Dict[str, Any] = {"error": message}
    if extra is not None:
        body["detail"] = extra
    return body


def _response(status_code: int, detail: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(status_code, detail))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    detail = {"error": DEFAULT_MESSAGES[400], "errors": jsonable_encoder(exc.errors())}
    return _response(status.HTTP_400_BAD_REQUEST, detail)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _response(exc.status_code, exc.detail)


async def internal_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception: {exc}")
    return _response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or None)


def register_error_handlers(app: FastAPI) -> None:
    """Attach shared exception handlers to the FastAPI application."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, internal_exception_handler)


__all__ = [
    "error_body",
    "register_error_handlers",
    "validation_exception_handler",
    "http_exception_handler",
    "internal_exception_handler",
]
