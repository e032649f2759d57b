"""Terminal and JSON rendering of trace outcomes."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .errors import ErrorKind
from .models import Blocked, Failed, Outcome, TraceResult

DIVIDER_PADDING = 15
SHORT_INDENT = 15

FAILURE_MESSAGES = {
    ErrorKind.TIMEOUT: "The request timed out. Sorry!",
    ErrorKind.CERTIFICATE_VALIDATION: "There was a certification validation error. Sorry!",
    ErrorKind.CONNECTION_REFUSED: "The connection was refused (possibly because of DNS). Sorry!",
}
BLOCKED_MESSAGE = "Cloudflare protection prevents tracing. Sorry!"


def wrap_url(url: str, width: int, indent: int = SHORT_INDENT) -> str:
    """Break ``url`` into ``width``-sized lines, indenting continuations."""

    if width <= 0 or len(url) <= width:
        return url
    chunks = [url[i : i + width] for i in range(0, len(url), width)]
    return ("\n" + " " * indent).join(chunks)


def outcome_payload(outcome: Outcome) -> Dict[str, Any]:
    result = outcome.result or TraceResult()
    payload = result.to_dict()
    payload["outcome"] = outcome.name
    if isinstance(outcome, Failed):
        payload["error"] = outcome.kind.value
        payload["message"] = outcome.message
    return payload


def render_json(console: Console, outcome: Outcome) -> None:
    text = json.dumps(outcome_payload(outcome), indent=2)
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def render_terse(console: Console, result: TraceResult) -> None:
    console.print(result.clean_url, markup=False, highlight=False, soft_wrap=True)


def _url_line(label: str, style: str, url: str, width: int) -> Text:
    return Text.assemble((label, style), ":     ", wrap_url(url, width))


def render_short(console: Console, result: TraceResult, width: int) -> None:
    console.print()
    console.print(_url_line("Final URL", "bold blue", result.final_url, width), soft_wrap=True)
    if result.clean_url != result.final_url:
        console.print()
        console.print(_url_line("Clean URL", "green", result.clean_url, width), soft_wrap=True)
        console.print()


def render_verbose(console: Console, result: TraceResult, width: int) -> None:
    divider_width = width + DIVIDER_PADDING
    if len(result.final_url) <= width:
        divider_width = len(result.final_url) + DIVIDER_PADDING
    divider = "-" * divider_width

    table = Table(show_edge=False, box=None, header_style="bold blue", padding=(0, 1))
    table.add_column("Hop", style="bright_cyan", justify="left", no_wrap=True)
    table.add_column("Status", justify="left", no_wrap=True)
    table.add_column("URL", overflow="fold", max_width=width)
    for hop in result.hops:
        table.add_row(str(hop.number), str(hop.status_code), Text(hop.url))

    console.print()
    console.print(table)
    console.print(divider, markup=False, highlight=False, soft_wrap=True)
    console.print(_url_line("Final URL", "bold blue", result.final_url, width), soft_wrap=True)
    if result.clean_url != result.final_url:
        console.print()
        console.print(_url_line("Clean URL", "green", result.clean_url, width), soft_wrap=True)
    console.print(divider, markup=False, highlight=False, soft_wrap=True)


def render_outcome(
    console: Console,
    outcome: Outcome,
    *,
    mode: str = "short",
    width: int = 120,
    clear_screen: bool = False,
) -> None:
    """Render ``outcome`` in one of the ``json``, ``terse``, ``short`` or ``verbose`` modes."""

    if mode == "json":
        render_json(console, outcome)
        return

    if isinstance(outcome, Blocked):
        console.print()
        console.print(BLOCKED_MESSAGE, markup=False, highlight=False)
        return
    if isinstance(outcome, Failed):
        message: Optional[str] = FAILURE_MESSAGES.get(outcome.kind)
        if message is None:
            console.print(
                f"Error tracing URL: {outcome.message}", markup=False, highlight=False, soft_wrap=True
            )
        else:
            console.print()
            console.print(message, markup=False, highlight=False)
        return

    result = outcome.result or TraceResult()
    if mode == "terse":
        render_terse(console, result)
        return

    if clear_screen:
        console.clear()
    if mode == "verbose":
        render_verbose(console, result, width)
    else:
        render_short(console, result, width)


__all__ = [
    "BLOCKED_MESSAGE",
    "FAILURE_MESSAGES",
    "wrap_url",
    "outcome_payload",
    "render_json",
    "render_terse",
    "render_short",
    "render_verbose",
    "render_outcome",
]
