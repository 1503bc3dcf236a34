from __future__ import annotations

import pytest

from app.core.errors import AppError


def test_defaults() -> None:
    err = AppError("boom")
    assert err.message == "boom"
    assert str(err) == "boom"
    assert err.status_code == 500
    assert err.code == "INTERNAL_ERROR"
    assert err.is_operational is True


@pytest.mark.parametrize(
    ("factory", "status", "code"),
    [
        (AppError.bad_request, 400, "BAD_REQUEST"),
        (AppError.unauthorized, 401, "UNAUTHORIZED"),
        (AppError.forbidden, 403, "FORBIDDEN"),
        (AppError.not_found, 404, "NOT_FOUND"),
        (AppError.conflict, 409, "CONFLICT"),
        (AppError.validation, 422, "VALIDATION_ERROR"),
    ],
)
def test_named_constructors(factory, status: int, code: str) -> None:
    err = factory("msg")
    assert err.status_code == status
    assert err.code == code
    assert err.is_operational is True


def test_named_constructor_accepts_custom_code() -> None:
    err = AppError.conflict("taken", "EMAIL_ALREADY_EXISTS")
    assert err.status_code == 409
    assert err.code == "EMAIL_ALREADY_EXISTS"


def test_internal_is_not_operational() -> None:
    err = AppError.internal()
    assert err.status_code == 500
    assert err.code == "INTERNAL_ERROR"
    assert err.is_operational is False


def test_attributes_are_read_only() -> None:
    err = AppError.bad_request("x")
    with pytest.raises(AttributeError):
        err.code = "OTHER"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        err.status_code = 200  # type: ignore[misc]


def test_to_dict_without_stack() -> None:
    err = AppError.not_found("gone", "USER_NOT_FOUND")
    assert err.to_dict() == {
        "message": "gone",
        "statusCode": 404,
        "code": "USER_NOT_FOUND",
        "isOperational": True,
    }


def test_to_dict_with_stack_of_raised_error() -> None:
    try:
        raise AppError.bad_request("bad")
    except AppError as e:
        data = e.to_dict(include_stack=True)
    assert "Traceback" in data["stack"]
    assert "AppError: bad" in data["stack"]


def test_stack_is_none_when_never_raised() -> None:
    assert AppError("never raised").stack() is None
