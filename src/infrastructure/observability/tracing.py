"""OpenTelemetry distributed tracing setup.

Configures OpenTelemetry SDK with OTLP exporter for distributed tracing.
Includes auto-instrumentation for FastAPI, SQLAlchemy, and HTTPX.
"""

from importlib.metadata import PackageNotFoundError, version

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from src.infrastructure.config.settings import ObservabilitySettings
from src.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


def _service_version() -> str:
    try:
        return version("sli-reporting")
    except PackageNotFoundError:
        return "0.0.0"


def setup_tracing(
    config: ObservabilitySettings,
    environment: str = "development",
    engine: AsyncEngine | None = None,
) -> TracerProvider | None:
    """Setup OpenTelemetry tracing with OTLP exporter.

    Configures:
    - TracerProvider with service name and version
    - OTLP/HTTP exporter for sending traces to collector
    - Trace sampling based on configured sample rate
    - Auto-instrumentation for HTTPX and SQLAlchemy

    Args:
        config: Observability settings
        environment: Deployment environment name
        engine: Database engine to instrument (optional)

    Returns:
        TracerProvider instance, or None when tracing is disabled

    Note:
        FastAPI must be instrumented separately after app creation
        using instrument_fastapi_app()
    """
    if not config.tracing_enabled:
        logger.info("OpenTelemetry tracing disabled")
        return None

    resource = Resource.create(
        {
            "service.name": config.service_name,
            "service.version": _service_version(),
            "deployment.environment": environment,
        }
    )

    sampler = ParentBased(TraceIdRatioBased(config.trace_sample_rate))
    provider = TracerProvider(resource=resource, sampler=sampler)

    otlp_exporter = OTLPSpanExporter(
        endpoint=f"{config.exporter_otlp_endpoint.rstrip('/')}/v1/traces"
    )
    provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
    trace.set_tracer_provider(provider)

    logger.info(
        "OpenTelemetry tracing configured",
        service_name=config.service_name,
        otlp_endpoint=config.exporter_otlp_endpoint,
        sample_rate=config.trace_sample_rate,
    )

    HTTPXClientInstrumentor().instrument()
    if engine is not None:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
    logger.info("Auto-instrumentation enabled for HTTPX and SQLAlchemy")

    return provider


def instrument_fastapi_app(app, config: ObservabilitySettings) -> None:
    """Instrument FastAPI application with OpenTelemetry.

    Must be called after FastAPI app is created. Probe and scrape endpoints
    are excluded from tracing.

    Args:
        app: FastAPI application instance
        config: Observability settings
    """
    if not config.tracing_enabled:
        return

    FastAPIInstrumentor.instrument_app(app, excluded_urls="health,metrics")
    logger.info("FastAPI auto-instrumentation enabled")


def get_tracer(name: str):
    """Get OpenTelemetry tracer for manual instrumentation.

    Args:
        name: Tracer name (typically __name__)

    Returns:
        Tracer instance for creating spans

    Example:
        >>> tracer = get_tracer(__name__)
        >>> with tracer.start_as_current_span("query_cluster") as span:
        ...     span.set_attribute("cluster_id", "c-green-test-1234")
    """
    return trace.get_tracer(name)
