"""Exception handlers rendering every failure in one JSON envelope.

Clients always receive::

    {"success": false, "error_code": "...", "message": "...", "details": {...}}
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..domain.errors import ServiceError, ValidationError
from ..infra.logging import get_logger

__all__ = ["error_payload", "register_exception_handlers"]

logger = get_logger(__name__)

HTTP_ERROR_CODES = {
    int(HTTPStatus.NOT_FOUND): "CD-NOT-FOUND",
    int(HTTPStatus.METHOD_NOT_ALLOWED): "CD-METHOD-NOT-ALLOWED",
}


def error_payload(
    error_code: str, message: str, details: Dict[str, Any] | None = None
) -> Dict[str, Any]:
    return {
        "success": False,
        "error_code": error_code,
        "message": message,
        "details": details or {},
    }


async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = int(exc.status_code)
    log_extra = {
        "path": request.url.path,
        "method": request.method,
        "error_code": exc.error_code,
        "status_code": status_code,
    }
    if status_code >= 500:
        logger.error("request_failed", exc_info=exc, extra=log_extra)
    else:
        logger.warning("request_rejected", extra={**log_extra, "reason": exc.message})
    return JSONResponse(
        status_code=status_code,
        content=error_payload(exc.error_code, exc.message, exc.details),
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    logger.warning(
        "request_validation_failed",
        extra={"path": request.url.path, "method": request.method, "errors": errors},
    )
    return JSONResponse(
        status_code=int(ValidationError.default_status),
        content=error_payload(
            ValidationError.default_code, "Invalid request", {"errors": errors}
        ),
    )


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    error_code = HTTP_ERROR_CODES.get(exc.status_code, f"CD-HTTP-{exc.status_code}")
    message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
    logger.warning(
        "http_error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(error_code, message),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
