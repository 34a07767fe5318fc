# app/core/error_handlers.py

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.constants.error_codes import ErrorCode
from app.core.config import APP_DEBUG
from app.core.exceptions import AppException, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."

REQUEST_SECTIONS = {"body", "query", "path", "header"}

HTTP_STATUS_TO_ERROR_CODE = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.PERMISSION_DENIED,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
}


def error_response(
    status_code: int,
    message: str,
    error_code: ErrorCode,
    details=None,
    headers: dict | None = None,
    **extra,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error_code": error_code,
            "details": details,
            **extra,
        },
        headers=headers,
    )


def format_validation_errors(errors) -> list[dict]:
    """Flatten pydantic error entries into one {field, message} item each."""
    formatted = []
    for err in errors:
        loc = list(err.get("loc", ()))
        if loc and loc[0] in REQUEST_SECTIONS:
            loc = loc[1:]
        formatted.append(
            {
                "field": ".".join(str(part) for part in loc) or "__root__",
                "message": err.get("msg", "Invalid value"),
            }
        )
    return formatted


async def app_exception_handler(request: Request, exc: AppException):
    return error_response(
        exc.status_code,
        exc.message,
        exc.error_code,
        exc.details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = format_validation_errors(exc.errors())
    logger.info(
        "Request rejected by validation",
        extra={"path": request.url.path, "fields": [d["field"] for d in details]},
    )
    return await app_exception_handler(request, ValidationError(details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Routing-level errors (unknown path, wrong method) land here
    if exc.status_code == 404:
        return await app_exception_handler(request, NotFoundError(exc.detail))

    return error_response(
        exc.status_code,
        exc.detail,
        HTTP_STATUS_TO_ERROR_CODE.get(exc.status_code, ErrorCode.INTERNAL_ERROR),
        headers=getattr(exc, "headers", None),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    # Services translate the constraints they expect; anything reaching here was not
    logger.warning(
        "Untranslated integrity error",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )
    return error_response(
        409, "A record with this information already exists", ErrorCode.CONFLICT
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "method": request.method},
    )

    extra = {}
    if APP_DEBUG:
        extra["debug"] = f"{type(exc).__name__}: {exc}"

    return error_response(
        500, GENERIC_ERROR_MESSAGE, ErrorCode.INTERNAL_ERROR, **extra
    )
