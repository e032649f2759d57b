import pytest

from link_trace.errors import ErrorKind
from link_trace.models import Blocked, Failed, Hop, LoopDetected, Success, TraceResult, status_code_class


@pytest.mark.parametrize(
    "code, expected",
    [(200, "2xx"), (204, "2xx"), (301, "3xx"), (399, "3xx"), (404, "4xx"), (508, "5xx"), (599, "5xx")],
)
def test_status_code_class(code, expected):
    assert status_code_class(code) == expected


@pytest.mark.parametrize("code", [0, 100, 199, 600, 999, -1])
def test_status_code_class_outside_range_is_empty(code):
    assert status_code_class(code) == ""


def test_trace_result_to_dict_uses_wire_names():
    result = TraceResult(hops=[Hop.create(1, "http://a/1?x=1", 200)], final_url="http://a/1?x=1")

    assert result.to_dict() == {
        "hops": [{"number": 1, "url": "http://a/1?x=1", "statusCode": 200, "statusCodeClass": "2xx"}],
        "finalURL": "http://a/1?x=1",
        "cleanURL": "http://a/1",
    }


def test_outcome_flags():
    result = TraceResult(final_url="http://a/")

    assert Success(result).result is result
    assert LoopDetected(result).result is result
    assert Blocked().result is None
    assert not any(o.is_error for o in (Success(result), LoopDetected(result), Blocked()))

    failed = Failed(ErrorKind.MISSING_HOST, "missing host")
    assert failed.is_error
    assert not failed.user_facing
    assert Failed(ErrorKind.CONNECTION_REFUSED).user_facing
