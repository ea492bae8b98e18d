"""Tests for core exceptions."""

import pytest

from keyset_pagination.core import exceptions as exc


def test_app_exception_defaults_title() -> None:
    error = exc.AppException(status_code=400, detail="bad")
    assert error.title == "Bad Request"
    assert error.type == "about:blank"
    assert error.extra == {}


def test_app_exception_problem_details_merges_extra() -> None:
    error = exc.AppException(status_code=422, detail="nope", type="x", extra={"field": "limit"})
    assert error.to_problem_details() == {
        "type": "x",
        "title": "Unprocessable Entity",
        "status": 422,
        "detail": "nope",
        "field": "limit",
    }


@pytest.mark.parametrize(
    ("code", "status", "type_"),
    [
        (exc.PaginationErrorCode.INVALID_TOKEN, 400, "invalid-token"),
        (exc.PaginationErrorCode.INVALID_SORT, 400, "invalid-sort"),
        (exc.PaginationErrorCode.INVALID_LIMIT, 400, "invalid-limit"),
        (exc.PaginationErrorCode.UNEXPECTED_ERROR, 500, "unexpected-error"),
    ],
)
def test_pagination_error_status_and_type(code, status, type_) -> None:
    error = exc.PaginationError("boom", code=code)
    assert error.code is code
    assert error.status_code == status
    assert error.type == type_
    assert str(error) == "boom"


def test_pagination_error_chains_cause() -> None:
    cause = RuntimeError("db down")
    error = exc.PaginationError("Failed", code=exc.PaginationErrorCode.UNEXPECTED_ERROR, cause=cause)
    assert error.__cause__ is cause
    assert "UNEXPECTED_ERROR" in repr(error)


def test_stash_key_error_is_codec_error() -> None:
    error = exc.StashKeyError("abc")
    assert isinstance(error, exc.CodecError)
    assert error.key == "abc"
    assert error.extra == {"key": "abc"}
    assert error.type == "codec-error"


def test_composition_error_is_codec_error() -> None:
    assert issubclass(exc.CodecCompositionError, exc.CodecError)
