"""Driver error codes for SQLAlchemy-backed storage.

``driver_error_code`` pulls the storage-level code out of a SQLAlchemy
exception (SQLSTATE for PostgreSQL drivers, the extended result name for
sqlite3). ``ERROR_CODES`` maps the codes this service cares about onto
envelope shapes; anything else is reported as ``DATABASE_ERROR``.
"""
from sqlalchemy.exc import NoResultFound, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from ..domain.errors import DriverErrorMapping

# коды, которые выдаём сами, когда у драйвера кода нет
NO_RESULT_FOUND = "NO_RESULT_FOUND"
STALE_DATA = "STALE_DATA"

UNIQUE_VIOLATION = DriverErrorMapping(409, "CONFLICT", "duplicate record, this value already exists")
RECORD_NOT_FOUND = DriverErrorMapping(404, "NOT_FOUND", "record not found")
INVALID_REFERENCE = DriverErrorMapping(400, "INVALID_REFERENCE", "invalid reference to another record")

ERROR_CODES: dict[str, DriverErrorMapping] = {
    # PostgreSQL SQLSTATE
    "23505": UNIQUE_VIOLATION,
    "23503": INVALID_REFERENCE,
    # sqlite3 (extended result codes)
    "SQLITE_CONSTRAINT_UNIQUE": UNIQUE_VIOLATION,
    "SQLITE_CONSTRAINT_PRIMARYKEY": UNIQUE_VIOLATION,
    "SQLITE_CONSTRAINT_FOREIGNKEY": INVALID_REFERENCE,
    # ORM
    NO_RESULT_FOUND: RECORD_NOT_FOUND,
    STALE_DATA: RECORD_NOT_FOUND,
}

DRIVER_EXCEPTIONS = (SQLAlchemyError,)


def driver_error_code(exc: BaseException) -> str | None:
    if isinstance(exc, NoResultFound):
        return NO_RESULT_FOUND
    if isinstance(exc, StaleDataError):
        return STALE_DATA
    if not isinstance(exc, SQLAlchemyError):
        return None
    orig = getattr(exc, "orig", None)
    for attr in ("sqlstate", "pgcode", "sqlite_errorname"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    return exc.code or type(exc).__name__
