"""
Unit tests for the URL construction engine.

build_url and parse_url are pure, so every test builds its own request.
"""

from __future__ import annotations

import pytest

from utm_builder.errors import (
    DuplicateKeyError,
    ErrorKind,
    InvalidKeyError,
    InvalidUrlError,
    InvalidUtmValueError,
)
from utm_builder.schemas.models.url_build import QueryParameter, UrlBuildRequest
from utm_builder.services.url_builder import build_url, parse_url


def _request(base_url="https://example.com", custom=(), **utm):
    return UrlBuildRequest(
        base_url=base_url,
        custom_params=tuple(QueryParameter(key=k, value=v) for k, v in custom),
        **utm,
    )


# ---------------------------------------------------------------------------
# build_url: happy paths
# ---------------------------------------------------------------------------


def test_base_url_only():
    built = build_url(_request()).unwrap()
    assert built.final_url == "https://example.com/"
    assert built.parameter_count == 0
    assert built.character_count == len("https://example.com/")


def test_source_and_medium():
    built = build_url(_request(utm_source="google", utm_medium="cpc")).unwrap()
    assert built.final_url == "https://example.com/?utm_source=google&utm_medium=cpc"
    assert built.parameter_count == 2
    assert built.character_count == len(built.final_url)


def test_utm_params_in_fixed_order_then_custom_in_insertion_order():
    request = _request(
        custom=[("zeta", "1"), ("alpha", "2")],
        utm_content="banner",
        utm_term="shoes",
        utm_campaign="spring",
        utm_medium="email",
        utm_source="newsletter",
    )
    built = build_url(request).unwrap()
    assert built.final_url == (
        "https://example.com/?utm_source=newsletter&utm_medium=email"
        "&utm_campaign=spring&utm_term=shoes&utm_content=banner&zeta=1&alpha=2"
    )
    assert built.parameter_count == 7


def test_values_are_form_encoded():
    built = build_url(
        _request(utm_campaign="summer sale", custom=[("q", "a&b=c/d")])
    ).unwrap()
    assert built.final_url == (
        "https://example.com/?utm_campaign=summer+sale&q=a%26b%3Dc%2Fd"
    )


def test_non_ascii_values_are_utf8_encoded():
    built = build_url(_request(utm_source="café")).unwrap()
    assert built.final_url == "https://example.com/?utm_source=caf%C3%A9"


def test_blank_values_are_skipped():
    request = _request(
        utm_source="  ",
        utm_medium="",
        custom=[("ref", ""), ("", "orphan"), ("  ", "  "), ("keep", "yes")],
    )
    built = build_url(request).unwrap()
    assert built.final_url == "https://example.com/?keep=yes"
    assert built.parameter_count == 1


def test_values_and_keys_are_trimmed():
    built = build_url(
        _request(utm_source="  google ", custom=[(" ref ", " x ")])
    ).unwrap()
    assert built.final_url == "https://example.com/?utm_source=google&ref=x"


def test_base_query_is_replaced():
    built = build_url(
        _request("https://example.com/landing?old=1&utm_source=stale", utm_source="new")
    ).unwrap()
    assert built.final_url == "https://example.com/landing?utm_source=new"


def test_base_query_dropped_without_params():
    built = build_url(_request("https://example.com/landing?old=1")).unwrap()
    assert built.final_url == "https://example.com/landing"


def test_fragment_is_preserved():
    built = build_url(
        _request("https://example.com/page#pricing", utm_source="x")
    ).unwrap()
    assert built.final_url == "https://example.com/page?utm_source=x#pricing"


def test_host_lowercased_and_default_port_dropped():
    built = build_url(_request("HTTPS://Shop.Example.COM:443/Path")).unwrap()
    assert built.final_url == "https://shop.example.com/Path"


def test_non_default_port_kept():
    built = build_url(_request("http://localhost:8080/app", utm_source="dev")).unwrap()
    assert built.final_url == "http://localhost:8080/app?utm_source=dev"


def test_ipv6_host_kept_in_brackets():
    built = build_url(_request("http://[::1]:3000/")).unwrap()
    assert built.final_url == "http://[::1]:3000/"


def test_build_is_deterministic():
    request = _request(utm_source="google", custom=[("ref", "a")])
    assert build_url(request) == build_url(request)


# ---------------------------------------------------------------------------
# build_url: failures
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "base_url",
    ["", "example.com", "ftp://example.com", "https://", "https://exa\ud800mple.com"],
)
def test_invalid_base_url(base_url):
    result = build_url(_request(base_url, utm_source="google"))
    assert result.is_err
    assert isinstance(result.error, InvalidUrlError)
    assert result.error.field == "base_url"


def test_custom_key_shadowing_utm_key():
    result = build_url(_request(utm_source="google", custom=[("utm_source", "x")]))
    assert result.is_err
    assert isinstance(result.error, DuplicateKeyError)
    assert result.error.kind is ErrorKind.DUPLICATE_KEY
    assert result.error.details == {"key": "utm_source"}


def test_custom_utm_key_allowed_when_utm_field_blank():
    built = build_url(_request(custom=[("utm_source", "x")])).unwrap()
    assert built.final_url == "https://example.com/?utm_source=x"


def test_invalid_url_reported_before_duplicates():
    result = build_url(_request("nope", custom=[("a", "1"), ("a", "2")]))
    assert result.error.kind is ErrorKind.INVALID_URL


@pytest.mark.parametrize(
    "request_kwargs, error_type, field",
    [
        ({"utm_source": "\ud800"}, InvalidUtmValueError, "utm_source"),
        ({"utm_medium": "cpc", "utm_campaign": "spring\udfff"}, InvalidUtmValueError, "utm_campaign"),
        ({"custom": [("ok", "1"), ("ref\ud800", "x")]}, InvalidKeyError, "custom_params[1].key"),
        ({"custom": [("", "\ud800"), ("ref", "\ud800")]}, InvalidUtmValueError, "custom_params[1].value"),
    ],
    ids=["utm_source", "utm_campaign", "custom_key", "custom_value"],
)
def test_unencodable_text_names_the_field(request_kwargs, error_type, field):
    result = build_url(_request(**request_kwargs))
    assert result.is_err
    assert isinstance(result.error, error_type)
    assert result.error.kind in (ErrorKind.INVALID_UTM_VALUE, ErrorKind.INVALID_KEY)
    assert result.error.field == field


def test_unwrap_raises_the_error():
    with pytest.raises(InvalidUrlError):
        build_url(_request("")).unwrap()


# ---------------------------------------------------------------------------
# parse_url
# ---------------------------------------------------------------------------


def test_parse_splits_utm_and_custom_params():
    request = parse_url(
        "https://example.com/p?utm_source=google&ref=abc&utm_medium=cpc#top"
    ).unwrap()
    assert request.base_url == "https://example.com/p#top"
    assert request.utm_source == "google"
    assert request.utm_medium == "cpc"
    assert request.utm_campaign is None
    assert request.custom_params == (QueryParameter(key="ref", value="abc"),)


def test_parse_decodes_form_encoding():
    request = parse_url("https://example.com/?utm_campaign=summer+sale&q=a%26b").unwrap()
    assert request.utm_campaign == "summer sale"
    assert request.custom_params[0].value == "a&b"


def test_parse_repeated_utm_key_goes_to_custom():
    request = parse_url("https://example.com/?utm_source=a&utm_source=b").unwrap()
    assert request.utm_source == "a"
    assert request.custom_params == (QueryParameter(key="utm_source", value="b"),)
    assert build_url(request).error.kind is ErrorKind.DUPLICATE_KEY


def test_parse_rejects_invalid_url():
    result = parse_url("not a url")
    assert result.is_err
    assert result.error.field == "url"


@pytest.mark.parametrize(
    "request_kwargs",
    [
        {},
        {"utm_source": "google", "utm_medium": "cpc"},
        {"utm_campaign": "summer sale", "custom": [("q", "a&b"), ("page", "2")]},
        {"base_url": "https://example.com/a/b#frag", "utm_term": "café"},
    ],
    ids=["bare", "utm", "custom", "fragment"],
)
def test_parse_then_build_gives_the_same_url(request_kwargs):
    final_url = build_url(_request(**request_kwargs)).unwrap().final_url
    assert build_url(parse_url(final_url).unwrap()).unwrap().final_url == final_url
