"""Hop ledger, trace results and terminal outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from .errors import USER_FACING_KINDS, ErrorKind
from .url_tools import make_clean_url

LOOP_DETECTED_STATUS = int(HTTPStatus.LOOP_DETECTED)


def status_code_class(status_code: int) -> str:
    """Map a status code to ``"2xx"`` .. ``"5xx"``; anything else maps to ``""``."""

    if 200 <= status_code < 600:
        return f"{status_code // 100}xx"
    return ""


@dataclass(frozen=True)
class Hop:
    number: int
    url: str
    status_code: int
    status_code_class: str = ""

    @classmethod
    def create(cls, number: int, url: str, status_code: int) -> "Hop":
        return cls(
            number=number,
            url=url,
            status_code=status_code,
            status_code_class=status_code_class(status_code),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "url": self.url,
            "statusCode": self.status_code,
            "statusCodeClass": self.status_code_class,
        }


@dataclass(frozen=True)
class TraceResult:
    hops: List[Hop] = field(default_factory=list)
    final_url: str = ""

    @property
    def clean_url(self) -> str:
        return make_clean_url(self.final_url)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hops": [hop.to_dict() for hop in self.hops],
            "finalURL": self.final_url,
            "cleanURL": self.clean_url,
        }


class Outcome:
    """Terminal state of one trace.

    ``Success`` and ``LoopDetected`` carry a :class:`TraceResult`; ``Blocked``
    and ``Failed`` do not. Only ``Failed`` counts as an error.
    """

    name = "outcome"
    is_error = False

    @property
    def result(self) -> Optional[TraceResult]:
        return None


@dataclass(frozen=True)
class Success(Outcome):
    trace: TraceResult
    name = "success"

    @property
    def result(self) -> Optional[TraceResult]:
        return self.trace


@dataclass(frozen=True)
class LoopDetected(Outcome):
    trace: TraceResult
    name = "loop_detected"

    @property
    def result(self) -> Optional[TraceResult]:
        return self.trace


@dataclass(frozen=True)
class Blocked(Outcome):
    name = "blocked"


@dataclass(frozen=True)
class Failed(Outcome):
    kind: ErrorKind
    message: str = ""
    name = "error"
    is_error = True

    @property
    def user_facing(self) -> bool:
        return self.kind in USER_FACING_KINDS


__all__ = [
    "LOOP_DETECTED_STATUS",
    "status_code_class",
    "Hop",
    "TraceResult",
    "Outcome",
    "Success",
    "LoopDetected",
    "Blocked",
    "Failed",
]
