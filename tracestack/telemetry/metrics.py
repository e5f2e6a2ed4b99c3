from __future__ import annotations

from prometheus_client import Counter

spans_started_total = Counter(
    "tracestack_spans_started_total",
    "Total spans started through a trace stack",
    ["span_name"],
)

spans_ended_total = Counter(
    "tracestack_spans_ended_total",
    "Total spans ended through a trace stack",
    ["span_status"],
)

common_attributes_total = Counter(
    "tracestack_common_attributes_total",
    "Total common attributes registered on a trace stack",
    ["attribute_key"],
)
