from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from carelink.services.error_codes import ErrorCode
from carelink.services.exceptions import (
    AlreadyRegisteredError,
    CapacityExceededError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    UnauthorizedError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

_HTTP_CODES = {
    400: ErrorCode.VALIDATION_FAILED,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
}


def status_for_service_error(err: ServiceError) -> int:
    if isinstance(err, NotFoundError):
        status = 404
    elif isinstance(err, UnauthorizedError):
        status = 401
    elif isinstance(err, PermissionDeniedError):
        status = 403
    elif isinstance(err, ConflictError):
        status = 409
    elif isinstance(err, (AlreadyRegisteredError, CapacityExceededError, ValidationError)):
        status = 400
    else:
        status = 500
    return status


def error_response(
    status_code: int, message: str, code: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "code": code},
        headers=headers,
    )


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status = status_for_service_error(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return error_response(status, exc.message, exc.code, headers)


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        message = str(exc.detail.get("message", exc.detail))
        code = str(exc.detail.get("code", ErrorCode.HTTP_ERROR.value))
    else:
        message = str(exc.detail)
        code = _HTTP_CODES.get(exc.status_code, ErrorCode.HTTP_ERROR).value
    return error_response(exc.status_code, message, code, getattr(exc, "headers", None))


async def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return error_response(400, "; ".join(parts) or "invalid request", ErrorCode.VALIDATION_FAILED.value)


async def _storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("storage_failure", method=request.method, path=request.url.path)
    message = str(getattr(exc, "orig", None) or exc)
    return error_response(500, message, ErrorCode.STORAGE_FAILURE.value)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, _storage_error_handler)
