import logging

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)


def setup_tracing(
    service_name: str,
    otlp_endpoint: str,
    enabled: bool = True,
    service_version: str = "1.0.0",
) -> TracerProvider:
    """Install the global tracer provider.

    With ``enabled=False`` spans are still created, so trace ids show up in
    the logs, but nothing is exported.
    """
    provider = TracerProvider(
        resource=Resource.create(
            {"service.name": service_name, "service.version": service_version}
        )
    )
    if enabled:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
        logger.info("Exporting traces", extra={"otlp_endpoint": otlp_endpoint})
    trace.set_tracer_provider(provider)
    return provider
