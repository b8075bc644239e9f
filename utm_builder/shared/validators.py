"""
URL and field validators. Framework-agnostic, pure functions.

Every validator returns an ``Ok``/``Err`` result instead of raising, holds no
state and performs no I/O: the same input always gives the same result.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Sequence
from urllib.parse import SplitResult, urlsplit

from utm_builder.errors import (
    DuplicateKeyError,
    InvalidKeyError,
    InvalidQrDataError,
    InvalidUrlError,
    InvalidUtmValueError,
    ValidationError,
)
from utm_builder.schemas.models.url_build import (
    UTM_FIELDS,
    QueryParameter,
    UrlBuildRequest,
)
from utm_builder.shared.result import Err, Ok, Result

ALLOWED_SCHEMES = frozenset({"http", "https"})

_INVALID_KEY_CHARS = re.compile(r"[=&?#/\\]")
_INVALID_UTM_CHARS = re.compile(r"[<>'\"]")

# Numeric-mode capacity of a version 40 symbol at level L
MAX_QR_DATA_LENGTH = 4296


def validate_absolute_url(
    raw: str, field: str = "base_url"
) -> Result[SplitResult, InvalidUrlError]:
    """Parse *raw* as an absolute http/https URL.

    Whitespace is rejected, not trimmed: a caller that wants trimming must do
    it before calling. Schemes are compared case-insensitively because
    ``urlsplit`` lowercases them.

    Returns:
        ``Ok(SplitResult)`` for a usable URL, ``Err(InvalidUrlError)`` otherwise.
    """
    if not raw:
        return Err(InvalidUrlError("URL is required", field=field))
    if any(ch.isspace() or ord(ch) < 0x20 for ch in raw):
        return Err(InvalidUrlError("URL must not contain whitespace", field=field))
    try:
        raw.encode("utf-8")  # lone surrogates have no UTF-8 form
        parts = urlsplit(raw)
        parts.port  # raises ValueError for a non-numeric or out-of-range port
    except ValueError:
        return Err(InvalidUrlError("Invalid URL format", field=field))
    if parts.scheme not in ALLOWED_SCHEMES:
        return Err(
            InvalidUrlError("URL must start with http:// or https://", field=field)
        )
    if not parts.hostname:
        return Err(InvalidUrlError("URL must include a host", field=field))
    return Ok(parts)


def _duplicate_key_errors(
    reserved_keys: Iterable[str], custom_params: Sequence[QueryParameter]
) -> Iterator[DuplicateKeyError]:
    seen = set(reserved_keys)
    for index, param in enumerate(custom_params):
        if not param.is_complete:
            continue
        key = param.key.strip()
        if key in seen:
            yield DuplicateKeyError(
                "Parameter keys must be unique",
                field=f"custom_params[{index}].key",
                details={"key": key},
            )
        seen.add(key)


def validate_unique_keys(
    reserved_keys: Iterable[str], custom_params: Sequence[QueryParameter]
) -> Result[None, DuplicateKeyError]:
    """Reject the first custom key that repeats a reserved or earlier custom key.

    Only parameters that will reach the query string take part (key and value
    both non-blank). Comparison is exact and case-sensitive on the trimmed key.
    """
    for error in _duplicate_key_errors(reserved_keys, custom_params):
        return Err(error)
    return Ok(None)


def validate_param_key(key: str, field: str = "key") -> Result[str, InvalidKeyError]:
    """Return ``Ok(key)`` unless it contains ``=``, ``&``, ``?``, ``#``, ``/`` or ``\\``."""
    if _INVALID_KEY_CHARS.search(key):
        return Err(
            InvalidKeyError("Key cannot contain =, &, ?, #, /, or \\", field=field)
        )
    return Ok(key)


def validate_utm_value(field: str, value: str) -> Result[str, InvalidUtmValueError]:
    """Return ``Ok(value)`` unless it contains ``<``, ``>``, ``'`` or ``\"``."""
    if _INVALID_UTM_CHARS.search(value):
        return Err(
            InvalidUtmValueError(
                "UTM parameter contains invalid characters", field=field
            )
        )
    return Ok(value)


def validate_qr_code_data(data: str, field: str = "data") -> Result[str, InvalidQrDataError]:
    """Return ``Ok(data)`` for non-blank UTF-8 text within the QR length limit."""
    if not data or not data.strip():
        return Err(InvalidQrDataError("QR code data cannot be empty", field=field))
    if len(data) > MAX_QR_DATA_LENGTH:
        return Err(
            InvalidQrDataError(
                f"QR code data exceeds maximum length ({MAX_QR_DATA_LENGTH} characters)",
                field=field,
            )
        )
    try:
        data.encode("utf-8")
    except UnicodeEncodeError:
        return Err(
            InvalidQrDataError("Contains characters that cannot be encoded", field=field)
        )
    return Ok(data)


def collect_field_errors(request: UrlBuildRequest) -> list[ValidationError]:
    """Every field-level problem in *request*, in form order.

    Stricter than ``build_url``: key and UTM character rules are reported here
    for form feedback but never block a build.
    """
    errors: list[ValidationError] = []

    url_result = validate_absolute_url(request.base_url)
    if url_result.is_err:
        errors.append(url_result.error)

    reserved = []
    for key in UTM_FIELDS:
        value = getattr(request, key)
        if not value or not value.strip():
            continue
        reserved.append(key)
        utm_result = validate_utm_value(key, value)
        if utm_result.is_err:
            errors.append(utm_result.error)

    for index, param in enumerate(request.custom_params):
        if not param.key.strip():
            continue
        key_result = validate_param_key(param.key, field=f"custom_params[{index}].key")
        if key_result.is_err:
            errors.append(key_result.error)

    errors.extend(_duplicate_key_errors(reserved, request.custom_params))
    return errors
