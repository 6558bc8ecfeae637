import logging
import os
from unittest.mock import patch

from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags, use_span

from src.shared.logging import TraceContextFilter, _parse_headers, resolve_log_level


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )


def test_trace_context_filter_sets_ids_when_span_active() -> None:
    filter_ = TraceContextFilter()

    span_context = SpanContext(
        trace_id=int("1" * 32, 16),
        span_id=int("2" * 16, 16),
        is_remote=False,
        trace_flags=TraceFlags(TraceFlags.SAMPLED),
        trace_state={},
    )
    record = _record()

    with use_span(NonRecordingSpan(span_context), end_on_exit=False):
        assert filter_.filter(record) is True

    assert record.trace_id == "1" * 32
    assert record.span_id == "2" * 16


def test_trace_context_filter_sets_placeholders_when_no_span() -> None:
    record = _record()

    assert TraceContextFilter().filter(record) is True
    assert record.trace_id == "-"
    assert record.span_id == "-"


def test_parse_headers_skips_malformed_pairs() -> None:
    assert _parse_headers("api-key=abc, x-tenant = t1,broken") == {
        "api-key": "abc",
        "x-tenant": "t1",
    }
    assert _parse_headers(None) == {}


def test_resolve_log_level_reads_environment() -> None:
    with patch.dict(os.environ, {"APP_LOG_LEVEL": "debug"}):
        assert resolve_log_level() == logging.DEBUG

    with patch.dict(os.environ, {}, clear=True):
        assert resolve_log_level("WARNING") == logging.WARNING
