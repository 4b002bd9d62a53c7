"""OpenTelemetry tracing for the tenantops service.

Spans cover HTTP routes, SQL statements and the provisioning and setup-link
operations (via the traced decorator); trace ids are added to log records. Exporter
is chosen from settings: console for local runs, OTLP gRPC for collectors.
"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from tenantops.core.config import Settings

logger = logging.getLogger(__name__)

# Probes would otherwise dominate the trace volume.
UNTRACED_URLS = "/api/v1/health"


class TelemetryConfig:
    """Tracer provider plus FastAPI, SQLAlchemy and logging instrumentation."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
        exporter: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.exporter = exporter
        self.otlp_endpoint = otlp_endpoint
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
            exporter=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    def _span_exporter(self) -> SpanExporter | None:
        if self.exporter == "none":
            return None
        if self.exporter == "otlp" and self.otlp_endpoint:
            logger.info("Using OTLP span exporter: %s", self.otlp_endpoint)
            return OTLPSpanExporter(
                endpoint=self.otlp_endpoint,
                insecure=self.otlp_endpoint.startswith("http://"),
            )
        if self.exporter != "console":
            logger.warning("Unknown exporter '%s' (or missing OTLP endpoint), using console", self.exporter)
        return ConsoleSpanExporter()

    def start(self, app: FastAPI, engine: AsyncEngine) -> bool:
        """Install the tracer provider and instrument app, engine and logging.

        Returns False (and leaves tracing off) when setup fails; the service
        keeps running without spans.
        """
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=TraceIdRatioBased(self.sample_rate),
            )
            exporter = self._span_exporter()
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
            FastAPIInstrumentor.instrument_app(
                app, tracer_provider=provider, excluded_urls=UNTRACED_URLS
            )
            SQLAlchemyInstrumentor().instrument(
                engine=engine.sync_engine, tracer_provider=provider
            )
            LoggingInstrumentor().instrument(tracer_provider=provider, set_logging_format=True)
        except Exception:
            logger.exception("Failed to initialize telemetry; continuing without tracing")
            return False
        self.tracer_provider = provider
        logger.info(
            "OpenTelemetry initialized: service=%s version=%s exporter=%s",
            self.service_name,
            self.service_version,
            self.exporter,
        )
        return True

    def shutdown(self) -> None:
        """Flush remaining spans and stop the provider."""
        if self.tracer_provider is None:
            return
        self.tracer_provider.shutdown()
        self.tracer_provider = None
