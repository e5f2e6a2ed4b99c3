import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import INVALID_SPAN_CONTEXT

from tracestack.core import config as config_module


@pytest.fixture
def exporter():
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    yield provider
    provider.shutdown()


@pytest.fixture
def tracer(tracer_provider):
    return tracer_provider.get_tracer("tracestack.tests")


@pytest.fixture(autouse=True)
def clear_settings_cache():
    config_module.get_settings.cache_clear()
    yield
    config_module.get_settings.cache_clear()


class RecordingSpan:
    """Span double that keeps accepting attributes after end, unlike the SDK."""

    def __init__(self, name, context=None, attributes=None):
        self.name = name
        self.context = context
        self.attributes = dict(attributes or {})
        self.end_calls = []

    def set_attribute(self, key, value):
        self.attributes[key] = value

    def set_attributes(self, attributes):
        self.attributes.update(attributes)

    def end(self, end_time=None):
        self.end_calls.append(end_time)

    def get_span_context(self):
        return INVALID_SPAN_CONTEXT

    def is_recording(self):
        return not self.end_calls


class RecordingTracer:
    def __init__(self):
        self.spans = []

    def start_span(self, name, context=None, attributes=None):
        span = RecordingSpan(name, context, attributes)
        self.spans.append(span)
        return span


@pytest.fixture
def recording_tracer():
    return RecordingTracer()
