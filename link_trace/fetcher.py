"""Single-hop HTTP fetching."""

from __future__ import annotations

import logging
import ssl
import time
from dataclasses import dataclass
from typing import Iterator, Optional

import httpx

from .config import Config
from .errors import ErrorKind, FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResponse:
    url: str
    status_code: int
    location: Optional[str] = None
    server: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code <= 399


def build_client(config: Config) -> httpx.Client:
    """Create a client that never follows redirects on its own.

    ``header_timeout`` bounds the wait for the first response byte; the other
    phases share the overall ``timeout``.
    """

    return httpx.Client(
        headers={"User-Agent": config.user_agent},
        timeout=httpx.Timeout(config.timeout, read=config.header_timeout),
        follow_redirects=False,
    )


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def classify_transport_error(exc: httpx.HTTPError) -> ErrorKind:
    if isinstance(exc, httpx.TimeoutException):
        return ErrorKind.TIMEOUT
    if isinstance(exc, httpx.UnsupportedProtocol):
        return ErrorKind.INVALID_URL

    for link in _exception_chain(exc):
        if isinstance(link, ssl.SSLCertVerificationError):
            return ErrorKind.CERTIFICATE_VALIDATION
        if isinstance(link, ConnectionRefusedError):
            return ErrorKind.CONNECTION_REFUSED

    text = str(exc).lower()
    if "certificate_verify_failed" in text or "certificate verify failed" in text:
        return ErrorKind.CERTIFICATE_VALIDATION
    if "connection refused" in text:
        return ErrorKind.CONNECTION_REFUSED
    return ErrorKind.NETWORK_ERROR


class Fetcher:
    def __init__(
        self,
        client: httpx.Client,
        user_agent: Optional[str] = None,
        deadline: Optional[float] = None,
    ) -> None:
        self.client = client
        self.user_agent = user_agent
        # Wall-clock seconds allowed for one hop, headers included.
        self.deadline = deadline

    def fetch(self, url: str) -> FetchResponse:
        """Issue one GET and return its status and redirect headers.

        The body is never read; the stream is closed before returning. A hop
        whose headers arrive after ``deadline`` seconds counts as a timeout.
        """

        headers = {"User-Agent": self.user_agent} if self.user_agent else None
        started = time.monotonic()
        try:
            with self.client.stream("GET", url, headers=headers, follow_redirects=False) as response:
                result = FetchResponse(
                    url=url,
                    status_code=response.status_code,
                    location=response.headers.get("location"),
                    server=response.headers.get("server"),
                )
        except (httpx.InvalidURL, httpx.HTTPError) as exc:
            if isinstance(exc, httpx.HTTPError):
                kind = classify_transport_error(exc)
            else:
                kind = ErrorKind.INVALID_URL
            logger.debug("Request to %s failed (%s): %s", url, kind.value, exc)
            raise FetchError(f"error accessing URL {url}: {exc}", kind) from exc

        elapsed = time.monotonic() - started
        if self.deadline is not None and elapsed > self.deadline:
            logger.debug("GET %s took %.2fs, over the %.2fs limit", url, elapsed, self.deadline)
            raise FetchError(f"error accessing URL {url}: no response within {self.deadline:g}s", ErrorKind.TIMEOUT)

        logger.debug("GET %s -> %s", url, result.status_code)
        return result


__all__ = ["Fetcher", "FetchResponse", "build_client", "classify_transport_error"]
