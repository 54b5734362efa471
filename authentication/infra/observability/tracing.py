"""
OpenTelemetry Distributed Tracing

Configures the OpenTelemetry tracer provider for the API process. Service
modules import ``tracer`` from here and wrap their operations in spans; until
``setup_tracing`` runs, the API's no-op provider makes those spans free.
"""

import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

_initialized = False


def setup_tracing(
    service_name: str = "rewear-api",
    console_export: bool = False,
    enable: bool = True,
) -> None:
    """
    Initialize OpenTelemetry tracing and Django auto-instrumentation.

    Args:
        service_name: Name of the service for tracing
        console_export: Also print finished spans to stdout (local debugging)
        enable: Enable/disable tracing

    Example:
        setup_tracing(service_name="rewear-api", console_export=True)
    """
    global _initialized

    if _initialized:
        logger.warning("Tracing already initialized. Skipping.")
        return

    if not enable:
        logger.info("Tracing disabled via configuration")
        return

    resource = Resource(attributes={SERVICE_NAME: service_name})
    tracer_provider = TracerProvider(resource=resource)

    if console_export:
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("Console span exporter enabled")

    trace.set_tracer_provider(tracer_provider)

    # Auto-instrument Django (traces all HTTP requests)
    DjangoInstrumentor().instrument()

    _initialized = True
    logger.info(f"OpenTelemetry tracing initialized for service: {service_name}")


def get_tracer(name: str = __name__) -> trace.Tracer:
    """
    Get a tracer for creating custom spans.

    The proxy tracer returned by the API follows whichever provider is
    installed later, so module-level tracers are safe.
    """
    return trace.get_tracer(name)


def add_span_attributes(span: trace.Span, **attributes: Optional[object]) -> None:
    """
    Add custom attributes to a span, skipping ``None`` values.

    Example:
        with tracer.start_as_current_span("catalog.query") as span:
            add_span_attributes(span, sort="newest", limit=20)
    """
    for key, value in attributes.items():
        if value is None:
            continue
        if isinstance(value, (bool, int, float, str)):
            span.set_attribute(key, value)
        else:
            span.set_attribute(key, str(value))


tracer = get_tracer("rewear")
