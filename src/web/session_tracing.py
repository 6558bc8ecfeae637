"""Web session-level tracing helpers.

Creates a long-lived OpenTelemetry span per browser session so that every
request belonging to one calculation (parameter edits, the relay call, the
copy/export actions) shares a trace id in logs and exported traces.

Usage:
    span = get_or_create_session_span(session_id)
    with trace.use_span(span, end_on_exit=False):
        ...

    # When results are ready or the session is reset:
    end_session_span(session_id)
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Dict

from src.shared.tracing import get_tracer


@dataclass
class _SessionSpan:
    span: Any
    created_at: float


_SESSION_SPANS: Dict[str, _SessionSpan] = {}
_LOCK = threading.Lock()


def get_or_create_session_span(session_id: str) -> Any:
    with _LOCK:
        existing = _SESSION_SPANS.get(session_id)
        if existing is not None:
            return existing.span

        tracer = get_tracer(instrumenting_module_name="credit_calculator.session")
        span = tracer.start_span(
            name="session.web",
            attributes={"session.id": session_id, "session.type": "web"},
        )
        _SESSION_SPANS[session_id] = _SessionSpan(span=span, created_at=time.time())
        return span


def end_session_span(session_id: str) -> None:
    with _LOCK:
        existing = _SESSION_SPANS.pop(session_id, None)
    if existing is not None:
        existing.span.end()
