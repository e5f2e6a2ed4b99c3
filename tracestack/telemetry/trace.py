from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from types import TracebackType
from typing import Generic, TypeVar

from opentelemetry import trace as otel_trace
from opentelemetry.context import Context
from opentelemetry.trace import Span, SpanContext, Status, StatusCode, Tracer
from opentelemetry.util import types

from tracestack.core.errors import UnknownAttributeKeyError, UnknownSpanNameError
from tracestack.core.logging import get_logger
from tracestack.telemetry.metrics import common_attributes_total, spans_ended_total, spans_started_total

SPAN_STATUS_ATTRIBUTE = "span_status"
SPAN_STATUS_EMPTY_STACK = "error_empty_stack"
SPAN_STATUS_NOT_TOP = "error_not_top"
OTHER_METRIC_LABEL = "other"

NameT = TypeVar("NameT", bound=str)
KeyT = TypeVar("KeyT", bound=str)


def _plain(value: str) -> str:
    # str-based enum members would otherwise leak "Enum.MEMBER" into exported data
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _as_allowed(values: Iterable[str] | None) -> frozenset[str] | None:
    if values is None:
        return None
    return frozenset(_plain(v) for v in values)


def _metric_label(value: str, allowed: frozenset[str] | None) -> str:
    # Only closed-set values become label values; everything else shares one series.
    if allowed is not None and value in allowed:
        return value
    return OTHER_METRIC_LABEL


class SpanWrapper(Generic[KeyT]):
    """Forwards to an OpenTelemetry span; ``end()`` pops it from the owning trace."""

    def __init__(self, owner: Trace[str, KeyT], span: Span) -> None:
        self._owner = owner
        self._span = span

    def get_span_context(self) -> SpanContext:
        return self._span.get_span_context()

    def set_attribute(self, key: KeyT, value: str) -> SpanWrapper[KeyT]:
        self._span.set_attribute(self._owner._check_attribute_key(key), value)
        return self

    def set_attributes(self, attributes: Mapping[KeyT, str]) -> SpanWrapper[KeyT]:
        self._span.set_attributes({self._owner._check_attribute_key(k): v for k, v in attributes.items()})
        return self

    def add_event(
        self,
        name: str,
        attributes_or_timestamp: types.Attributes | int | float | None = None,
        timestamp: int | None = None,
    ) -> SpanWrapper[KeyT]:
        """
        Add an event. A number in second position is the event time in ns since the
        epoch (floats are truncated to int) and any trailing ``timestamp`` is ignored.
        """
        if isinstance(attributes_or_timestamp, (int, float)) and not isinstance(attributes_or_timestamp, bool):
            self._span.add_event(name, timestamp=int(attributes_or_timestamp))
        else:
            self._span.add_event(name, attributes=attributes_or_timestamp, timestamp=timestamp)
        return self

    def set_status(self, status: Status | StatusCode, description: str | None = None) -> SpanWrapper[KeyT]:
        self._span.set_status(status, description)
        return self

    def update_name(self, name: str) -> SpanWrapper[KeyT]:
        self._span.update_name(name)
        return self

    def record_exception(self, exception: BaseException, attributes: types.Attributes = None) -> SpanWrapper[KeyT]:
        self._span.record_exception(exception, attributes=attributes)
        return self

    def end(self, end_time: int | None = None) -> None:
        self._owner._end_span(self._span, end_time)

    def is_recording(self) -> bool:
        return self._span.is_recording()

    def __enter__(self) -> SpanWrapper[KeyT]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is not None:
            self._span.record_exception(exc)
            self._span.set_status(Status(StatusCode.ERROR, f"{exc_type.__name__}: {exc}"))
        self.end()


class Trace(Generic[NameT, KeyT]):
    """
    Keeps track of a stack of OpenTelemetry spans for one logical flow.

    The first span started is the root span. Every span started after that gets
    the most recently started, still open span as its parent. Ending a span pops
    it from the stack. Not safe to share between concurrent flows: use one
    ``Trace`` per request.

    ``span_names`` and ``attribute_keys`` optionally restrict names and keys to a
    closed set (any iterable of strings, typically a ``str`` enum class). Unknown
    values raise when ``strict`` is on and are logged otherwise.
    """

    def __init__(
        self,
        tracer: Tracer,
        *,
        span_names: Iterable[NameT] | None = None,
        attribute_keys: Iterable[KeyT] | None = None,
        strict: bool = True,
    ) -> None:
        self._tracer = tracer
        self._span_stack: list[Span] = []
        self._common_attributes: dict[str, str] = {}
        self._span_names = _as_allowed(span_names)
        self._attribute_keys = _as_allowed(attribute_keys)
        self.strict = strict
        self.logger = get_logger(__name__)

    def get_span_stack(self) -> list[Span]:
        return list(self._span_stack)

    @property
    def common_attributes(self) -> dict[str, str]:
        return dict(self._common_attributes)

    def add_common_attribute(self, key: KeyT, value: str) -> None:
        """Set an attribute on every open span and on every span started later."""
        attribute_key = self._check_attribute_key(key)
        for span in self._span_stack:
            span.set_attribute(attribute_key, value)
        self._common_attributes[attribute_key] = value
        common_attributes_total.labels(attribute_key=_metric_label(attribute_key, self._attribute_keys)).inc()

    def start_span(
        self,
        name: NameT,
        attributes: types.Attributes = None,
        context: Context | None = None,
    ) -> SpanWrapper[KeyT]:
        """
        Start a span parented to the top of the stack and return its wrapper.

        Common attributes are written after ``attributes`` and win on conflict.
        Without a stack parent the span is a root of ``context``, or of an empty
        context when none is given, so no ambient current span is picked up.
        """
        span_name = self._check_span_name(name)
        parent = self._span_stack[-1] if self._span_stack else None
        if parent is not None:
            parent_context = otel_trace.set_span_in_context(parent, context)
        elif context is not None:
            parent_context = context
        else:
            parent_context = Context()

        span = self._tracer.start_span(span_name, context=parent_context, attributes=attributes)
        if self._common_attributes:
            span.set_attributes(self._common_attributes)
        self._span_stack.append(span)
        spans_started_total.labels(span_name=_metric_label(span_name, self._span_names)).inc()
        return SpanWrapper(self, span)

    def _end_span(self, span: Span, end_time: int | None = None) -> None:
        status: str | None = None
        if not self._span_stack:
            status = SPAN_STATUS_EMPTY_STACK
        elif self._span_stack[-1] is not span:
            # Leave the stack alone rather than guess which entry to drop.
            status = SPAN_STATUS_NOT_TOP
        else:
            self._span_stack.pop()

        if status is not None:
            span.set_attribute(SPAN_STATUS_ATTRIBUTE, status)
            span_context = span.get_span_context()
            self.logger.warning(
                "Span ended out of stack order",
                extra={
                    "event": "trace.end_empty_stack" if status == SPAN_STATUS_EMPTY_STACK else "trace.end_not_top",
                    "span_name": getattr(span, "name", None),
                    "trace_id": otel_trace.format_trace_id(span_context.trace_id),
                    "span_id": otel_trace.format_span_id(span_context.span_id),
                    "stack_depth": len(self._span_stack),
                },
            )
        span.end(end_time=end_time)
        spans_ended_total.labels(span_status=status or "ok").inc()

    def _check_span_name(self, name: str) -> str:
        span_name = _plain(name)
        if self._span_names is not None and span_name not in self._span_names:
            if self.strict:
                raise UnknownSpanNameError(span_name, self._span_names)
            self.logger.warning(
                "Unknown span name",
                extra={"event": "trace.unknown_span_name", "span_name": span_name},
            )
        return span_name

    def _check_attribute_key(self, key: str) -> str:
        attribute_key = _plain(key)
        if self._attribute_keys is not None and attribute_key not in self._attribute_keys:
            if self.strict:
                raise UnknownAttributeKeyError(attribute_key, self._attribute_keys)
            self.logger.warning(
                "Unknown attribute key",
                extra={"event": "trace.unknown_attribute_key", "attribute_key": attribute_key},
            )
        return attribute_key
