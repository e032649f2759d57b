"""link-trace: follow redirect chains to the real destination of a URL."""

from .models import Blocked, Failed, Hop, LoopDetected, Outcome, Success, TraceResult
from .tracer import RedirectTracer, trace_url
from .url_tools import make_clean_url, resolve_relative_redirect, unwrap_nested_destination

__all__ = [
    "Blocked",
    "Failed",
    "Hop",
    "LoopDetected",
    "Outcome",
    "Success",
    "TraceResult",
    "RedirectTracer",
    "trace_url",
    "make_clean_url",
    "resolve_relative_redirect",
    "unwrap_nested_destination",
]

__version__ = "0.1.0"
