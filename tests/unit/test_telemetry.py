"""TelemetryConfig wiring from settings."""

from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from tenantops.core.config import get_settings
from tenantops.shared.telemetry import TelemetryConfig


def test_from_settings_uses_app_identity() -> None:
    settings = get_settings()
    telemetry = TelemetryConfig.from_settings(settings)
    assert telemetry.service_name == settings.app_name
    assert telemetry.service_version == settings.app_version
    assert telemetry.tracer_provider is None


def test_exporter_selection() -> None:
    assert TelemetryConfig("svc", "1", exporter="none")._span_exporter() is None
    assert isinstance(TelemetryConfig("svc", "1")._span_exporter(), ConsoleSpanExporter)
    # otlp without an endpoint falls back to console
    assert isinstance(TelemetryConfig("svc", "1", exporter="otlp")._span_exporter(), ConsoleSpanExporter)
    otlp = TelemetryConfig("svc", "1", exporter="otlp", otlp_endpoint="http://collector:4317")
    assert isinstance(otlp._span_exporter(), OTLPSpanExporter)


def test_shutdown_without_start_is_noop() -> None:
    TelemetryConfig("svc", "1").shutdown()
