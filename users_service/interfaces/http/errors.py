"""Centralized error handling.

Every exception that leaves a route ends up in ``handle_error`` and is turned
into the same JSON envelope::

    {
        "success": false,
        "error": {"code": "...", "message": "...", "details": [...]},
        "timestamp": "2024-01-01T00:00:00+00:00",
        "path": "/users/1"
    }

Classification order (first match wins): typed ``AppError``, storage error
with a driver code, native validation error, routing ``HTTPException``,
anything else as ``INTERNAL_ERROR``. Storage errors are recognised through a
``DriverErrors`` adapter supplied at registration, so this module does not
depend on a particular database driver.
"""
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...domain.errors import AppError, DriverErrorMapping, UNKNOWN_DRIVER_ERROR, validation_error
from .validation import to_details

logger = structlog.get_logger(__name__)

INTERNAL_MESSAGE = "internal server error"

HTTP_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


@dataclass(frozen=True)
class DriverErrors:
    """How to recognise storage failures: which exceptions, how to read their code, what each code means."""
    exception_types: tuple[type[BaseException], ...]
    code_of: Callable[[BaseException], str | None]
    table: Mapping[str, DriverErrorMapping]


@dataclass(frozen=True)
class ErrorPayload:
    status_code: int
    code: str
    message: str
    details: list[dict[str, Any]] = field(default_factory=list)
    stack: str | None = None
    headers: dict[str, str] | None = None


def normalize_error(exc: BaseException, driver_errors: DriverErrors | None = None,
                    debug: bool = False, method: str = "", path: str = "") -> ErrorPayload:
    if isinstance(exc, AppError):
        return ErrorPayload(exc.status_code, exc.code, exc.message, exc.details)

    driver_code = driver_errors.code_of(exc) if driver_errors else None
    if driver_code is not None:
        mapped = driver_errors.table.get(driver_code, UNKNOWN_DRIVER_ERROR)
        details = [{"driverCode": driver_code}] if debug else []
        return ErrorPayload(mapped.status_code, mapped.code, mapped.message, details)

    if isinstance(exc, RequestValidationError):
        return normalize_error(validation_error(to_details(exc.errors(), strip_source=True)))
    if isinstance(exc, PydanticValidationError):
        return normalize_error(validation_error(to_details(exc.errors())))

    if isinstance(exc, StarletteHTTPException):
        code = HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
        if exc.status_code == 404:
            message = f"Route {method} {path} not found"
        else:
            message = str(exc.detail)
        return ErrorPayload(exc.status_code, code, message, headers=getattr(exc, "headers", None))

    if debug:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return ErrorPayload(500, "INTERNAL_ERROR", str(exc) or INTERNAL_MESSAGE, stack=stack)
    return ErrorPayload(500, "INTERNAL_ERROR", INTERNAL_MESSAGE)


def error_envelope(payload: ErrorPayload, path: str) -> dict[str, Any]:
    error: dict[str, Any] = {"code": payload.code, "message": payload.message}
    if payload.details:
        error["details"] = payload.details
    if payload.stack:
        error["stack"] = payload.stack
    return {
        "success": False,
        "error": error,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": path,
    }


def register_error_handlers(app: FastAPI, driver_errors: DriverErrors | None = None,
                            debug: bool = False, log_tracebacks: bool = True) -> None:
    """Route every exception class the pipeline can produce through one handler.

    ``debug`` exposes raw messages (and stack traces) of unexpected errors in
    the response; ``log_tracebacks`` controls stack traces in the log.
    """

    async def handle_error(request: Request, exc: Exception) -> JSONResponse:
        method, path = request.method, request.url.path
        payload = normalize_error(exc, driver_errors, debug=debug, method=method, path=path)

        log = logger.error if payload.status_code >= 500 else logger.warning
        log(
            "request_failed",
            method=method,
            path=path,
            status_code=payload.status_code,
            code=payload.code,
            message=str(exc) or payload.message,
            exc_info=exc if log_tracebacks else None,
        )
        return JSONResponse(
            status_code=payload.status_code,
            content=error_envelope(payload, path),
            headers=payload.headers,
        )

    handled: list[type[BaseException]] = [AppError, RequestValidationError, PydanticValidationError,
                                          StarletteHTTPException]
    if driver_errors:
        handled.extend(driver_errors.exception_types)
    for exc_class in handled:
        app.add_exception_handler(exc_class, handle_error)
    # Exception обрабатывается в ServerErrorMiddleware, после ответа Starlette пробрасывает его дальше
    app.add_exception_handler(Exception, handle_error)
