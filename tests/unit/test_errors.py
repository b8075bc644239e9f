"""
Unit tests for the error hierarchy and its JSON rendering.
"""

import pytest

from utm_builder.errors import (
    AppError,
    DuplicateKeyError,
    ErrorKind,
    InvalidUrlError,
    NotFoundError,
    ShortenError,
)


def test_to_dict_includes_only_set_fields():
    assert NotFoundError("Build not found").to_dict() == {
        "error": "Build not found",
        "code": "not_found",
    }
    assert DuplicateKeyError(
        "Parameter keys must be unique", field="custom_params[0].key", details={"key": "ref"}
    ).to_dict() == {
        "error": "Parameter keys must be unique",
        "code": "duplicate_key",
        "kind": "DUPLICATE_KEY",
        "field": "custom_params[0].key",
        "details": {"key": "ref"},
    }


def test_validation_errors_are_400():
    assert InvalidUrlError("bad").status_code == 400
    assert InvalidUrlError("bad").kind is ErrorKind.INVALID_URL


def test_equality_is_by_value():
    assert InvalidUrlError("bad", field="url") == InvalidUrlError("bad", field="url")
    assert InvalidUrlError("bad", field="url") != InvalidUrlError("bad", field="base_url")
    assert InvalidUrlError("bad") != AppError("bad")


@pytest.mark.parametrize(
    "kind, status",
    [
        (ErrorKind.INVALID_URL, 400),
        (ErrorKind.RATE_LIMIT, 429),
        (ErrorKind.NETWORK_ERROR, 503),
        (ErrorKind.API_ERROR, 502),
    ],
)
def test_shorten_error_status(kind, status):
    error = ShortenError("failed", kind)
    assert error.status_code == status
    assert error.to_dict()["kind"] == kind.value


def test_shorten_error_rejects_builder_kinds():
    with pytest.raises(ValueError):
        ShortenError("nope", ErrorKind.DUPLICATE_KEY)


def test_shorten_error_equality_ignores_details():
    assert ShortenError("x", ErrorKind.API_ERROR, details=[1]) == ShortenError(
        "x", ErrorKind.API_ERROR
    )
    assert ShortenError("x", ErrorKind.API_ERROR) != ShortenError("x", ErrorKind.RATE_LIMIT)
