from opentelemetry.sdk.trace import TracerProvider

from tracestack.core import telemetry as telemetry_module
from tracestack.core.config import Settings


def test_configure_telemetry_disabled_returns_none():
    settings = Settings(_env_file=None, OTEL_ENABLED="false")
    assert telemetry_module.configure_telemetry(settings) is None


def test_configure_telemetry_console_exporter(monkeypatch):
    installed = []
    monkeypatch.setattr(telemetry_module.trace, "set_tracer_provider", installed.append)
    settings = Settings(_env_file=None, OTEL_TRACES_EXPORTER="console", OTEL_SERVICE_NAME="orders")
    provider = telemetry_module.configure_telemetry(settings)
    assert isinstance(provider, TracerProvider)
    assert installed == [provider]
    assert provider.resource.attributes["service.name"] == "orders"
    provider.shutdown()


def test_get_tracer_prefers_explicit_provider(tracer_provider, exporter):
    tracer = telemetry_module.get_tracer("tests", tracer_provider)
    tracer.start_span("explicit").end()
    assert [s.name for s in exporter.get_finished_spans()] == ["explicit"]


def test_configure_telemetry_skips_unsupported_exporters(monkeypatch, caplog):
    caplog.set_level("INFO", logger="tracestack.core.telemetry")
    monkeypatch.setattr(telemetry_module.trace, "set_tracer_provider", lambda provider: None)
    settings = Settings(_env_file=None, OTEL_TRACES_EXPORTER="console,zipkin")
    provider = telemetry_module.configure_telemetry(settings)
    assert isinstance(provider, TracerProvider)
    skipped = [r for r in caplog.records if getattr(r, "event", None) == "telemetry_exporters_skipped"]
    assert skipped[0].exporters == ["zipkin"]
    provider.shutdown()


def test_configure_telemetry_only_unsupported_exporters_disables():
    settings = Settings(_env_file=None, OTEL_TRACES_EXPORTER="jaeger")
    assert telemetry_module.configure_telemetry(settings) is None
