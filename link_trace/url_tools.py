"""URL helper utilities for redirect targets."""

from __future__ import annotations

import re
from typing import Optional, Tuple
from urllib.parse import SplitResult, quote, unquote, unquote_to_bytes, urlsplit, urlunsplit

from .errors import ErrorKind, RedirectError

# Wrapper parameters that embed the real destination, in priority order.
NESTED_DESTINATION_PARAMS = ("returnUri", "redir")

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
# Characters left as-is when re-escaping a value that is not valid UTF-8.
_REESCAPE_SAFE = "/:?#[]@!$&'()*+,;=%~"


def _split(url: str) -> SplitResult:
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise RedirectError(f"could not parse URL {url!r}: {exc}") from exc
    return parts


def resolve_relative_redirect(
    previous_url: Optional[str],
    location: str,
    request_url: Optional[str],
) -> str:
    """Turn a ``Location`` header value into an absolute URL.

    A missing scheme or host is taken from ``previous_url`` when there is one,
    otherwise from ``request_url``. Path, query and fragment are kept exactly
    as given in ``location``.
    """

    target = _split(location)
    previous = _split(previous_url) if previous_url else None
    request = _split(request_url) if request_url else None

    scheme = target.scheme
    if not scheme:
        if previous is not None:
            scheme = previous.scheme
        elif request is not None:
            scheme = request.scheme
        else:
            raise RedirectError(
                f"missing scheme for relative redirect {location!r}", ErrorKind.MISSING_SCHEME
            )

    netloc = target.netloc
    if not netloc:
        if previous is not None:
            netloc = previous.netloc
        elif request is not None:
            netloc = request.netloc
        else:
            raise RedirectError(
                f"missing host for relative redirect {location!r}", ErrorKind.MISSING_HOST
            )

    return urlunsplit((scheme, netloc, target.path, target.query, target.fragment))


def _find_nested_param(query: str) -> Optional[Tuple[str, str]]:
    raw_values = {}
    for pair in query.split("&"):
        name, _, value = pair.partition("=")
        if name in NESTED_DESTINATION_PARAMS and name not in raw_values:
            raw_values[name] = value

    for name in NESTED_DESTINATION_PARAMS:
        value = raw_values.get(name)
        if value:
            return name, value
    return None


def unwrap_nested_destination(url: str) -> str:
    """Expose a destination wrapped inside ``returnUri`` or ``redir``.

    The first matching parameter is decoded once, leftover ``%3A``/``%2F``
    escapes from double encoding are replaced, and the query string is
    rewritten to hold only that parameter. Other parameters and the fragment
    are dropped. URLs without either parameter are returned unchanged.
    """

    parts = _split(url)
    match = _find_nested_param(parts.query)
    if match is None:
        return url

    name, raw_value = match
    if _MALFORMED_ESCAPE.search(raw_value):
        raise RedirectError(f"could not decode {name} parameter in {url!r}")

    try:
        decoded = unquote(raw_value, errors="strict")
    except UnicodeDecodeError:
        decoded = quote(unquote_to_bytes(raw_value), safe=_REESCAPE_SAFE)
    decoded = decoded.replace("%3A", ":").replace("%2F", "/")
    return f"{parts.scheme}://{parts.netloc}{parts.path}?{name}={decoded}"


def make_clean_url(url: str) -> str:
    """Drop everything from the first ``?`` onward."""

    return url.split("?", 1)[0]


__all__ = [
    "NESTED_DESTINATION_PARAMS",
    "resolve_relative_redirect",
    "unwrap_nested_destination",
    "make_clean_url",
]
