"""Unit tests for the application exception hierarchy."""

import pytest

from notorica.core.exceptions import (
    ApplicationError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (NotFoundError(), "RES_NOT_FOUND"),
        (ValidationError(), "VAL_VALIDATION_ERROR"),
        (ConflictError(), "RES_CONFLICT"),
        (StorageError(), "SYS_STORAGE_ERROR"),
        (ApplicationError("boom"), "SYS_INTERNAL_ERROR"),
    ],
)
def test_error_codes(error, code):
    assert isinstance(error, ApplicationError)
    assert error.code == code


def test_message_is_exception_text():
    error = NotFoundError("Note '1' not found")
    assert str(error) == "Note '1' not found"
    assert error.message == "Note '1' not found"


def test_validation_details_default_to_empty():
    assert ValidationError().details == {}
    assert ValidationError("bad", details={"color": "x"}).details == {"color": "x"}
