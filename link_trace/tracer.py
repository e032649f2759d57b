"""Redirect resolution loop.

The tracer requests one URL at a time, records every hop, and stops on the
first non-redirect status. It never prints, exits or retries: every terminal
state comes back as an :class:`~link_trace.models.Outcome`.
"""

from __future__ import annotations

import logging
from collections import Counter
from http import HTTPStatus
from typing import List, Optional

import httpx

from .config import Config
from .errors import FetchError, RedirectError
from .fetcher import Fetcher, build_client
from .models import (
    LOOP_DETECTED_STATUS,
    Blocked,
    Failed,
    Hop,
    LoopDetected,
    Outcome,
    Success,
    TraceResult,
)
from .url_tools import resolve_relative_redirect, unwrap_nested_destination

logger = logging.getLogger(__name__)

# Server header marker for anti-bot interstitials that strip Location.
ANTI_BOT_SERVER_MARKER = "cloudflare"
# SSO redirects to this authority are reported as-is and end the trace.
SSO_AUTHORITY_PREFIX = "https://outlook.office365.com"


class RedirectTracer:
    """Follow a redirect chain hop by hop using a :class:`Fetcher`."""

    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher

    def trace(self, seed_url: str) -> Outcome:
        hops: List[Hop] = []
        visited: Counter = Counter()
        number = 1
        current = seed_url
        previous_url: Optional[str] = None

        while True:
            if visited[current] >= 1:
                hops.append(Hop.create(number, current, LOOP_DETECTED_STATUS))
                logger.debug("Redirect loop detected at %s", current)
                return LoopDetected(TraceResult(hops=hops, final_url=current))
            visited[current] += 1

            try:
                response = self.fetcher.fetch(current)
            except FetchError as exc:
                return Failed(exc.kind, exc.message)

            hops.append(Hop.create(number, current, response.status_code))

            if not response.is_redirect:
                logger.debug("Trace of %s ended at %s after %d hop(s)", seed_url, current, len(hops))
                return Success(TraceResult(hops=hops, final_url=current))

            location = response.location
            if not location:
                if ANTI_BOT_SERVER_MARKER in (response.server or ""):
                    logger.debug("Redirect without Location from %s looks blocked", current)
                    return Blocked()
                logger.debug("Redirect without Location from %s, stopping", current)
                return Success(TraceResult(hops=[], final_url=current))

            if location.startswith(SSO_AUTHORITY_PREFIX):
                hops.append(Hop.create(number + 2, location, int(HTTPStatus.OK)))
                logger.debug("SSO redirect to %s ends the trace", location)
                return Success(TraceResult(hops=hops, final_url=location))

            try:
                absolute = resolve_relative_redirect(previous_url, location, current)
                next_url = unwrap_nested_destination(absolute)
            except RedirectError as exc:
                return Failed(exc.kind, exc.message)

            logger.debug("Hop %d: %s -> %s", number, current, next_url)
            number += 1
            current = next_url
            previous_url = next_url


def trace_url(
    seed_url: str,
    config: Optional[Config] = None,
    client: Optional[httpx.Client] = None,
) -> Outcome:
    """Trace ``seed_url`` once.

    A client built from ``config`` is closed before returning; a client passed
    in by the caller is left open.
    """

    config = config or Config()
    if client is not None:
        fetcher = Fetcher(client, user_agent=config.user_agent, deadline=config.timeout)
        return RedirectTracer(fetcher).trace(seed_url)

    with build_client(config) as owned_client:
        fetcher = Fetcher(owned_client, user_agent=config.user_agent, deadline=config.timeout)
        return RedirectTracer(fetcher).trace(seed_url)


__all__ = [
    "ANTI_BOT_SERVER_MARKER",
    "SSO_AUTHORITY_PREFIX",
    "RedirectTracer",
    "trace_url",
]
