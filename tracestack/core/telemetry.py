from __future__ import annotations

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider

from tracestack.core.config import Settings
from tracestack.core.logging import get_logger

SUPPORTED_EXPORTERS = ("otlp", "console")


def configure_telemetry(settings: Settings) -> TracerProvider | None:
    logger = get_logger(__name__)
    requested = settings.otel_exporters
    exporters = [e for e in requested if e in SUPPORTED_EXPORTERS]
    skipped = [e for e in requested if e not in SUPPORTED_EXPORTERS and e != "none"]
    if skipped:
        logger.warning(
            "telemetry.exporters_skipped",
            extra={"event": "telemetry_exporters_skipped", "exporters": skipped},
        )
    if not settings.otel_enabled or not exporters:
        logger.info("telemetry.disabled", extra={"event": "telemetry_disabled"})
        return None

    try:
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SimpleSpanProcessor
        from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio

        provider = TracerProvider(
            resource=Resource.create({"service.name": settings.otel_service_name}),
            sampler=ParentBasedTraceIdRatio(settings.otel_sampler_arg),
        )
        if "console" in exporters:
            provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
        if "otlp" in exporters:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

            exporter = OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint, insecure=True)
            provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
        logger.info(
            "telemetry.enabled",
            extra={"event": "telemetry_enabled", "exporters": exporters},
        )
        return provider
    except Exception as exc:  # noqa: BLE001
        logger.warning("telemetry.init_failed", extra={"event": "telemetry_init_failed"}, exc_info=exc)
        return None


def get_tracer(name: str, provider: TracerProvider | None = None) -> trace.Tracer:
    if provider is not None:
        return provider.get_tracer(name)
    return trace.get_tracer(name)
