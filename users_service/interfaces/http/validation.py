"""Request validation.

``validate`` runs a pydantic schema over untrusted input and returns the
normalized model (trimmed, lowercased, defaulted, coerced). On failure every
violated rule is collected into ``{field, message, code}`` records and raised
as a single ``VALIDATION_ERROR``.

``body``, ``path_params`` and ``query_params`` build FastAPI dependencies that
read one request source, validate it and hand the normalized model to the
endpoint, so routes only ever see validated data.
"""
from typing import Any, Callable, Iterable, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from ...domain.errors import validation_error

M = TypeVar("M", bound=BaseModel)

MESSAGES = {
    "missing": "field is required",
    "string_type": "must be a string",
    "string_too_short": "must have at least {min_length} characters",
    "string_too_long": "must have at most {max_length} characters",
    "enum": "must be {expected}",
    "extra_forbidden": "unknown field",
    "url_parsing": "invalid URL",
    "url_type": "invalid URL",
    "url_scheme": "invalid URL",
    "greater_than": "must be greater than {gt}",
    "less_than_equal": "must be at most {le}",
    "int_parsing": "must be a number",
    "int_type": "must be a number",
    "model_type": "must be an object",
    "model_attributes_type": "must be an object",
    "dict_type": "must be an object",
    "json_invalid": "request body must be valid JSON",
}

# FastAPI добавляет источник первым элементом loc
SOURCES = {"body", "path", "query", "header", "cookie"}


def _message(error: dict[str, Any]) -> str:
    template = MESSAGES.get(error["type"])
    if template is None:
        return error["msg"]
    try:
        return template.format(**(error.get("ctx") or {}))
    except (KeyError, IndexError):
        return error["msg"]


def to_details(errors: Iterable[dict[str, Any]], strip_source: bool = False) -> list[dict[str, Any]]:
    details = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if strip_source and loc and loc[0] in SOURCES:
            loc = loc[1:]
        details.append({
            "field": ".".join(str(part) for part in loc),
            "message": _message(error),
            "code": error["type"],
        })
    return details


def validate(schema: type[M], data: Any) -> M:
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise validation_error(to_details(exc.errors())) from exc


def body(schema: type[M]) -> Callable:
    async def dependency(request: Request):
        try:
            payload = await request.json()
        except ValueError as exc:
            raise validation_error([{
                "field": "body",
                "message": MESSAGES["json_invalid"],
                "code": "json_invalid",
            }]) from exc
        return validate(schema, payload)
    return dependency


def path_params(schema: type[M]) -> Callable:
    async def dependency(request: Request):
        return validate(schema, dict(request.path_params))
    return dependency


def query_params(schema: type[M]) -> Callable:
    async def dependency(request: Request):
        return validate(schema, dict(request.query_params))
    return dependency
