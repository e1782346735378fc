from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

logger = logging.getLogger(__name__)

# Health checks and metric scrapes are not traced.
_EXCLUDED_URLS = "health/live,health/ready,metrics"

_provider: TracerProvider | None = None


def current_trace_id() -> str | None:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format(span_context.trace_id, "032x")


def _sample_ratio() -> float:
    try:
        ratio = float(os.getenv("OTEL_TRACES_SAMPLER_RATIO", "1.0"))
    except ValueError:
        return 1.0
    return min(1.0, max(0.0, ratio))


def _build_provider() -> TracerProvider:
    resource = Resource.create(
        {
            SERVICE_NAME: os.getenv("OTEL_SERVICE_NAME", "qrdine-backend"),
            "deployment.environment": os.getenv("APP_ENV", "dev").lower(),
        }
    )
    provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(_sample_ratio())),
    )

    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        return provider
    try:
        exporter = OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
    except Exception:
        logger.exception("otel_exporter_setup_failed")
        return provider
    provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def configure_otel(app: FastAPI) -> None:
    global _provider
    if _provider is None:
        _provider = _build_provider()
        trace.set_tracer_provider(_provider)
        set_global_textmap(TraceContextTextMapPropagator())

    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=_provider,
        excluded_urls=_EXCLUDED_URLS,
    )
