import pytest

from users_service.domain.errors import (
    AppError,
    ErrorKind,
    conflict,
    forbidden,
    internal_error,
    not_found,
    unauthorized,
    validation_error,
)


@pytest.mark.parametrize("factory, status_code, code", [
    (lambda: validation_error([]), 400, "VALIDATION_ERROR"),
    (lambda: not_found("User"), 404, "NOT_FOUND"),
    (lambda: conflict("email"), 409, "CONFLICT"),
    (unauthorized, 401, "UNAUTHORIZED"),
    (forbidden, 403, "FORBIDDEN"),
    (internal_error, 500, "INTERNAL_ERROR"),
])
def test_factories_set_status_and_code(factory, status_code, code):
    err = factory()
    assert isinstance(err, AppError)
    assert err.status_code == status_code
    assert err.code == code


def test_validation_error_keeps_details_in_order():
    details = [
        {"field": "nome", "message": "too short"},
        {"field": "email", "message": "invalid"},
    ]
    err = validation_error(details)
    assert err.message == "invalid input data"
    assert err.details == details
    # копия, а не тот же список
    assert err.details is not details


def test_not_found_default_message_uses_resource():
    err = not_found("User")
    assert err.message == "User not found"
    assert err.details == [{"resource": "User"}]


def test_not_found_custom_message():
    err = not_found("User", "User with id 7 not found")
    assert str(err) == "User with id 7 not found"
    assert err.details == [{"resource": "User"}]


def test_conflict_carries_field():
    err = conflict("email")
    assert err.message == "data conflict"
    assert err.details == [{"field": "email"}]


def test_reserved_kinds_have_no_details():
    assert unauthorized().details == []
    assert forbidden().details == []


def test_only_internal_is_not_operational():
    assert validation_error().operational
    assert not_found("User").operational
    assert conflict("email").operational
    assert not internal_error().operational


def test_app_error_is_raisable():
    with pytest.raises(AppError) as exc_info:
        raise conflict("email", "email already registered")
    assert exc_info.value.kind is ErrorKind.CONFLICT
    assert exc_info.value.message == "email already registered"
