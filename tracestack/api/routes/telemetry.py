from __future__ import annotations

from fastapi import APIRouter

from tracestack.core.config import get_settings
from tracestack.schemas.telemetry import TelemetryStatusResponse

router = APIRouter()


@router.get("/status", response_model=TelemetryStatusResponse)
def telemetry_status() -> TelemetryStatusResponse:
    settings = get_settings()
    return TelemetryStatusResponse(
        otel_enabled=settings.otel_enabled,
        exporter=settings.otel_exporter,
        collector_endpoint=settings.otel_exporter_otlp_endpoint,
        service_name=settings.otel_service_name,
        sampler_arg=settings.otel_sampler_arg,
        strict_names=settings.strict_names,
    )
