import logging

import structlog
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

# OpenTelemetry
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from shared.config import settings

# Health checks and scrapes are noise in both traces and latency histograms
UNINSTRUMENTED_PATHS = ["/health", "/metrics"]


def add_otel_ids(logger, log_method, event_dict):
    """Structlog processor: puts the active trace/span ids on every log line."""
    span = trace.get_current_span()
    if span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = trace.format_trace_id(ctx.trace_id)
        event_dict["span_id"] = trace.format_span_id(ctx.span_id)
    return event_dict


def add_service_name(service_name: str):
    def processor(logger, log_method, event_dict):
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def configure_logging(service_name: str):
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_service_name(service_name),
            add_otel_ids,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_tracing(app: FastAPI, service_name: str):
    resource = Resource.create({SERVICE_NAME: service_name})
    provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(provider)

    # Export to the collector over OTLP gRPC
    exporter = OTLPSpanExporter(endpoint=settings.OTLP_ENDPOINT, insecure=True)
    provider.add_span_processor(BatchSpanProcessor(exporter))

    # Spans for every incoming request; SQL spans nest under them
    FastAPIInstrumentor.instrument_app(app, excluded_urls=",".join(UNINSTRUMENTED_PATHS))


def configure_metrics(app: FastAPI):
    # HTTP latency and status codes per route template, exposed at /metrics
    Instrumentator(
        should_group_status_codes=False,
        excluded_handlers=UNINSTRUMENTED_PATHS,
    ).instrument(app).expose(app, include_in_schema=False)


def setup_observability(app: FastAPI, service_name: str):
    """
    Bootstraps Logging, Tracing, and Metrics for the storefront app.
    Call this once in main.py before the routers are included.
    Tracing is skipped when TRACING_ENABLED=false (tests, local runs without a collector).
    """
    configure_logging(service_name)
    if settings.TRACING_ENABLED:
        configure_tracing(app, service_name)
    configure_metrics(app)
    structlog.get_logger(__name__).info(
        "observability_ready",
        tracing=settings.TRACING_ENABLED,
        otlp_endpoint=settings.OTLP_ENDPOINT if settings.TRACING_ENABLED else None,
    )
