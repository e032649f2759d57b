"""CLI entrypoint for link-trace."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .config import ConfigError, load_config
from .logging_utils import configure_logging
from .models import Failed, Outcome
from .render import render_outcome
from .tracer import trace_url

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Follow a URL's redirect chain and print where it really leads.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def exit_code_for(outcome: Outcome) -> int:
    """Only genuine errors exit non-zero; timeouts and refusals are reported, not failed."""

    if isinstance(outcome, Failed) and not outcome.user_facing:
        return 1
    return 0


@app.command()
def trace(
    url: str = typer.Argument(..., help="URL to trace"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output results as JSON"),
    terse: bool = typer.Option(False, "--terse", "-s", help="Print only the final/clean URL"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show every hop"),
    width: Optional[int] = typer.Option(None, "--width", "-w", min=1, help="Width of the URL column (default: 120)"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to a link-trace.toml file"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Optional log file path"),
    debug: bool = typer.Option(False, "--debug", help="Log each hop to stderr"),
) -> None:
    """Trace the redirects of URL."""

    configure_logging(debug=debug, log_file=log_file)

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    if width is not None:
        config.width = width

    if json_output or config.use_json:
        mode = "json"
    elif terse or config.always_terse:
        mode = "terse"
    elif verbose or config.always_verbose:
        mode = "verbose"
    else:
        mode = "short"

    logger.debug("Tracing %s (mode=%s, width=%s)", url, mode, config.width)
    outcome = trace_url(url, config)

    console = Console()
    render_outcome(
        console,
        outcome,
        mode=mode,
        width=config.width,
        clear_screen=config.clear_screen,
    )
    raise typer.Exit(code=exit_code_for(outcome))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
