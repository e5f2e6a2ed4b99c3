from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="tracestack", alias="APP_NAME")
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="APP_LOG_LEVEL")

    otel_enabled: bool = Field(default=True, alias="OTEL_ENABLED")
    # Comma-separated like the OpenTelemetry env var; unsupported names are skipped at startup.
    otel_exporter: str = Field(default="otlp", alias="OTEL_TRACES_EXPORTER")
    otel_exporter_otlp_endpoint: str = Field(
        default="http://otel-collector:4317",
        alias="OTEL_EXPORTER_OTLP_ENDPOINT",
    )
    otel_service_name: str = Field(default="tracestack", alias="OTEL_SERVICE_NAME")
    otel_sampler_arg: float = Field(default=1.0, ge=0.0, le=1.0, alias="OTEL_TRACES_SAMPLER_ARG")

    # Passed as Trace(strict=...) by the demo routes.
    strict_names: bool = Field(default=True, alias="TRACESTACK_STRICT_NAMES")

    @property
    def otel_exporters(self) -> list[str]:
        return [e.strip().lower() for e in self.otel_exporter.split(",") if e.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
