from urllib.parse import urlsplit

import pytest

from link_trace.errors import ErrorKind, RedirectError
from link_trace.url_tools import make_clean_url, resolve_relative_redirect, unwrap_nested_destination


def test_relative_location_uses_previous_url():
    assert resolve_relative_redirect("http://a.example/x", "/path", "https://b.example/y") == "http://a.example/path"


def test_relative_location_falls_back_to_request_url():
    assert resolve_relative_redirect(None, "/path", "https://b.example/y") == "https://b.example/path"


def test_relative_location_without_any_base_fails():
    with pytest.raises(RedirectError) as exc_info:
        resolve_relative_redirect(None, "/path", None)
    assert exc_info.value.kind is ErrorKind.MISSING_SCHEME


def test_scheme_relative_location_without_host_source_fails():
    with pytest.raises(RedirectError) as exc_info:
        resolve_relative_redirect(None, "https:/path", None)
    assert exc_info.value.kind is ErrorKind.MISSING_HOST


def test_protocol_relative_location_keeps_its_host():
    assert resolve_relative_redirect(None, "//cdn.example/a?b=1#frag", "https://b.example/y") == (
        "https://cdn.example/a?b=1#frag"
    )


def test_absolute_location_is_kept():
    location = "https://other.example/p?q=1"
    assert resolve_relative_redirect("http://a.example/x", location, "http://a.example/x") == location


def test_unparsable_location_is_a_parse_failure():
    with pytest.raises(RedirectError) as exc_info:
        resolve_relative_redirect(None, "http://[::1/broken", None)
    assert exc_info.value.kind is ErrorKind.REDIRECT_PARSE_FAILURE


def test_return_uri_replaces_query():
    unwrapped = unwrap_nested_destination("https://x/r?returnUri=%2Fhome%3Fid%3D1")
    assert urlsplit(unwrapped).query == "returnUri=/home?id=1"


def test_other_parameters_are_dropped():
    unwrapped = unwrap_nested_destination("https://x/r?a=1&redir=https%3A%2F%2Fy.example%2F&b=2#top")
    assert unwrapped == "https://x/r?redir=https://y.example/"


def test_return_uri_wins_over_redir():
    unwrapped = unwrap_nested_destination("https://x/r?redir=%2Fother&returnUri=%2Fhome")
    assert unwrapped == "https://x/r?returnUri=/home"


def test_empty_return_uri_falls_through_to_redir():
    assert unwrap_nested_destination("https://x/r?returnUri=&redir=%2Fb") == "https://x/r?redir=/b"


def test_double_encoded_separators_are_restored():
    unwrapped = unwrap_nested_destination("https://x/r?returnUri=https%253A%252F%252Fd.example%252Fp")
    assert unwrapped == "https://x/r?returnUri=https://d.example/p"


def test_plus_signs_are_not_decoded():
    assert unwrap_nested_destination("https://x/r?redir=%2Fsearch%3Fq%3Da+b") == "https://x/r?redir=/search?q=a+b"


def test_url_without_wrapper_is_unchanged():
    url = "https://x/r?returnURI=%2Fhome&other=1"
    assert unwrap_nested_destination(url) == url


def test_non_utf8_bytes_stay_escaped():
    assert unwrap_nested_destination("https://x/r?redir=%2Fcaf%E9") == "https://x/r?redir=/caf%E9"


def test_non_utf8_value_still_restores_double_encoded_separators():
    unwrapped = unwrap_nested_destination("https://x/r?returnUri=https%253A%252F%252Fd.example%252F%FF")
    assert unwrapped == "https://x/r?returnUri=https://d.example/%FF"


def test_malformed_escape_is_rejected():
    with pytest.raises(RedirectError) as exc_info:
        unwrap_nested_destination("https://x/r?returnUri=%E0%A4%A")
    assert exc_info.value.kind is ErrorKind.REDIRECT_PARSE_FAILURE


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://a.example/p?utm_source=x", "https://a.example/p"),
        ("https://a.example/p", "https://a.example/p"),
        ("https://a.example/p?x=1?y=2", "https://a.example/p"),
        ("?only", ""),
        ("", ""),
    ],
)
def test_clean_url(url, expected):
    assert make_clean_url(url) == expected
    assert make_clean_url(make_clean_url(url)) == make_clean_url(url)
