from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from opentelemetry.sdk.trace import TracerProvider
from prometheus_client import make_asgi_app

from tracestack.api.errors.handlers import register_exception_handlers
from tracestack.api.routes import demo, health, telemetry
from tracestack.core.config import get_settings
from tracestack.core.logging import configure_logging, get_logger
from tracestack.core.telemetry import configure_telemetry, get_tracer


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings = get_settings()
    configure_logging(app_settings)
    logger = get_logger(__name__)
    if app.state.tracer is None:
        provider = configure_telemetry(app_settings)
        app.state.tracer = get_tracer("tracestack.demo", provider)
    logger.info("startup.complete", extra={"event": "startup"})
    yield
    logger.info("shutdown.complete", extra={"event": "shutdown"})


def create_app(tracer_provider: TracerProvider | None = None) -> FastAPI:
    app_settings = get_settings()
    app = FastAPI(
        title=f"{app_settings.app_name} demo API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.tracer = get_tracer("tracestack.demo", tracer_provider) if tracer_provider is not None else None

    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(telemetry.router, prefix="/api/v1/telemetry")
    app.include_router(demo.router, prefix="/api/v1/demo")
    app.mount("/metrics", make_asgi_app())
    return app


app = create_app()
