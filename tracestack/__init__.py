from tracestack.core.errors import TraceStackError, UnknownAttributeKeyError, UnknownSpanNameError
from tracestack.telemetry.spans import span
from tracestack.telemetry.trace import (
    SPAN_STATUS_ATTRIBUTE,
    SPAN_STATUS_EMPTY_STACK,
    SPAN_STATUS_NOT_TOP,
    SpanWrapper,
    Trace,
)

__all__ = [
    "SPAN_STATUS_ATTRIBUTE",
    "SPAN_STATUS_EMPTY_STACK",
    "SPAN_STATUS_NOT_TOP",
    "SpanWrapper",
    "Trace",
    "TraceStackError",
    "UnknownAttributeKeyError",
    "UnknownSpanNameError",
    "span",
]
