"""
URL construction engine. Pure functions with no I/O and no state.

build_url() turns a UrlBuildRequest into a ConstructedUrl:

  1. base URL must be an absolute http/https URL
  2. no query key may appear twice (UTM keys and custom keys together)
  3. the base URL's own query string is replaced, never merged
  4. UTM params come first in fixed order, then custom params in insertion
     order; blank values (and blank custom keys) are skipped
  5. keys and values are form-encoded; the base URL is left as parsed

parse_url() is the reverse: it splits a built URL back into a request so a
saved or pasted link can be edited and rebuilt to the same string.
"""

from __future__ import annotations

from urllib.parse import SplitResult, parse_qsl, urlencode, urlunsplit

from utm_builder.errors import (
    InvalidKeyError,
    InvalidUrlError,
    InvalidUtmValueError,
    ValidationError,
)
from utm_builder.schemas.models.url_build import (
    UTM_KEYS,
    ConstructedUrl,
    QueryParameter,
    UrlBuildRequest,
)
from utm_builder.shared.result import Err, Ok, Result
from utm_builder.shared.validators import validate_absolute_url, validate_unique_keys

DEFAULT_PORTS = {"http": 80, "https": 443}


def _normalize_netloc(parts: SplitResult) -> str:
    """Lowercase the host and drop the scheme's default port; keep userinfo."""
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    netloc = host
    port = parts.port
    if port is not None and port != DEFAULT_PORTS[parts.scheme]:
        netloc = f"{netloc}:{port}"
    if "@" in parts.netloc:
        userinfo = parts.netloc.rpartition("@")[0]
        netloc = f"{userinfo}@{netloc}"
    return netloc


def _encodable(text: str) -> bool:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _unencodable_field(request: UrlBuildRequest) -> ValidationError:
    """Name the first field whose text has no UTF-8 form (e.g. a lone surrogate)."""
    message = "Contains characters that cannot be encoded"
    for key, value in request.utm_pairs():
        if not _encodable(value):
            return InvalidUtmValueError(message, field=key)
    for index, param in enumerate(request.custom_params):
        if not param.is_complete:
            continue
        if not _encodable(param.key):
            return InvalidKeyError(message, field=f"custom_params[{index}].key")
        if not _encodable(param.value):
            return InvalidUtmValueError(message, field=f"custom_params[{index}].value")
    return InvalidUtmValueError(message, field="custom_params")


def build_url(request: UrlBuildRequest) -> Result[ConstructedUrl, ValidationError]:
    """Build the final URL for *request*.

    Returns:
        ``Ok(ConstructedUrl)`` on success, or ``Err`` holding an
        ``InvalidUrlError`` / ``DuplicateKeyError``, or ``InvalidUtmValueError`` /
        ``InvalidKeyError`` naming a field that cannot be encoded. Never raises
        for bad input.
    """
    url_result = validate_absolute_url(request.base_url)
    if url_result.is_err:
        return url_result
    parts = url_result.value

    utm_pairs = request.utm_pairs()
    keys_result = validate_unique_keys(
        [key for key, _ in utm_pairs], request.custom_params
    )
    if keys_result.is_err:
        return keys_result

    pairs = utm_pairs + request.custom_pairs()
    try:
        query = urlencode(pairs)
    except UnicodeEncodeError:
        return Err(_unencodable_field(request))

    final_url = urlunsplit(
        (
            parts.scheme,
            _normalize_netloc(parts),
            parts.path or "/",
            query,
            parts.fragment,
        )
    )
    return Ok(
        ConstructedUrl(
            final_url=final_url,
            character_count=len(final_url),
            parameter_count=len(pairs),
        )
    )


def parse_url(url: str) -> Result[UrlBuildRequest, InvalidUrlError]:
    """Split *url* into a request: UTM keys to their fields, the rest to custom params.

    A repeated UTM key keeps its first value in the UTM field; later
    occurrences become custom params (and rebuilding reports them as
    duplicates).
    """
    url_result = validate_absolute_url(url, field="url")
    if url_result.is_err:
        return url_result
    parts = url_result.value

    utm: dict[str, str] = {}
    custom: list[QueryParameter] = []
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key in UTM_KEYS and key not in utm:
            utm[key] = value
        else:
            custom.append(QueryParameter(key=key, value=value))

    base_url = urlunsplit((parts.scheme, parts.netloc, parts.path, "", parts.fragment))
    return Ok(UrlBuildRequest(base_url=base_url, custom_params=tuple(custom), **utm))
