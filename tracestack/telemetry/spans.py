from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from opentelemetry.util import types

from tracestack.telemetry.trace import SpanWrapper, Trace


@contextmanager
def span(trace: Trace, name: str, **attrs: types.AttributeValue) -> Iterator[SpanWrapper]:
    # Ends through the trace stack even when the body raises; the exception is recorded first.
    with trace.start_span(name, attributes=attrs or None) as wrapper:
        yield wrapper
