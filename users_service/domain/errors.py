"""Typed operational errors.

One exception class, a closed set of kinds and a factory per kind.
Every error carries what the HTTP boundary needs to build the envelope:
status, machine code, human message and structured details.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(Enum):
    VALIDATION = (400, "VALIDATION_ERROR")
    UNAUTHORIZED = (401, "UNAUTHORIZED")
    FORBIDDEN = (403, "FORBIDDEN")
    NOT_FOUND = (404, "NOT_FOUND")
    CONFLICT = (409, "CONFLICT")
    INTERNAL = (500, "INTERNAL_ERROR")

    def __init__(self, status_code: int, code: str):
        self.status_code = status_code
        self.code = code


class AppError(Exception):
    def __init__(self, kind: ErrorKind, message: str, details: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = list(details or [])

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def operational(self) -> bool:
        return self.kind is not ErrorKind.INTERNAL

    def __repr__(self) -> str:
        return f"AppError(kind={self.kind.name}, message={self.message!r})"


def validation_error(details: list[dict[str, Any]] | None = None,
                     message: str = "invalid input data") -> AppError:
    return AppError(ErrorKind.VALIDATION, message, details)


def not_found(resource: str, message: str | None = None) -> AppError:
    return AppError(ErrorKind.NOT_FOUND, message or f"{resource} not found", [{"resource": resource}])


def conflict(field: str, message: str = "data conflict") -> AppError:
    return AppError(ErrorKind.CONFLICT, message, [{"field": field}])


def unauthorized(message: str = "authentication required") -> AppError:
    return AppError(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str = "access denied") -> AppError:
    return AppError(ErrorKind.FORBIDDEN, message)


def internal_error(message: str = "internal server error") -> AppError:
    return AppError(ErrorKind.INTERNAL, message)


@dataclass(frozen=True)
class DriverErrorMapping:
    """Envelope shape for a storage-level failure identified by a driver code."""
    status_code: int
    code: str
    message: str


UNKNOWN_DRIVER_ERROR = DriverErrorMapping(500, "DATABASE_ERROR", "database error")
