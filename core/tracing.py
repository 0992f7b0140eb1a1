import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from core.settings import Settings

log = structlog.get_logger(__name__)


def init_tracer(settings: Settings):
    """Initialize OpenTelemetry tracer with OTLP exporter"""
    if settings.DISABLE_TRACING:
        log.info("tracing disabled")
        return

    provider = TracerProvider(
        resource=Resource.create({"service.name": settings.OTEL_SERVICE_NAME})
    )
    try:
        exporter = OTLPSpanExporter()
    except Exception as exc:  # pragma: no cover – only hit without a collector
        log.warning("OTLP exporter unavailable, tracing disabled", error=str(exc))
        return

    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
