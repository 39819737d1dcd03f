"""Process-wide OpenTelemetry pipeline initialisation.

OpenTelemetry keeps its tracer provider and propagator in a global registry,
so :func:`init_tracing` must run exactly once, on the startup path, before the
service accepts requests. A second call raises :class:`AlreadyInitializedError`.
"""

import threading
from dataclasses import dataclass
from urllib.parse import urlparse

import structlog
from opentelemetry import propagate, trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON, ParentBased
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from service_tracing import DISTRIBUTION_NAME, __version__
from service_tracing.config import TracingSettings
from service_tracing.errors import AlreadyInitializedError, ExporterConfigError
from service_tracing.logging import parse_filter, setup_logging
from service_tracing.tracing.spans import TRACER_NAME

logger = structlog.get_logger()

DEFAULT_OTLP_ENDPOINT = "http://localhost:4317"

_lock = threading.Lock()
_pipeline: "TracingPipeline | None" = None


@dataclass(frozen=True)
class TracingPipeline:
    """Handle to the installed tracing pipeline.

    Request hooks accept ``pipeline.tracer`` so callers can pass the handle
    around instead of looking the tracer up in the global registry.
    """

    tracer_provider: TracerProvider
    tracer: trace.Tracer
    propagator: TextMapPropagator
    resource: Resource
    endpoint: str

    @property
    def service_name(self) -> str:
        return str(self.resource.attributes[SERVICE_NAME])

    def shutdown(self) -> None:
        """Flush pending spans and stop the batch exporter."""
        self.tracer_provider.shutdown()


def _build_exporter(endpoint: str) -> OTLPSpanExporter:
    if not endpoint.strip():
        raise ExporterConfigError("OTLP endpoint must not be empty", endpoint=endpoint)
    parsed = urlparse(endpoint)
    if not parsed.netloc:
        # bare host:port, otherwise read as scheme:path
        parsed = urlparse(f"//{endpoint}")
    try:
        # urlparse only validates the port lazily
        parsed.port
        return OTLPSpanExporter(endpoint=endpoint)
    except ValueError as exc:
        raise ExporterConfigError(f"invalid OTLP endpoint {endpoint!r}: {exc}", endpoint=endpoint) from exc


def _provider_installed() -> bool:
    return not isinstance(trace.get_tracer_provider(), trace.ProxyTracerProvider)


def init_tracing(
    service_name: str | None = None,
    otlp_endpoint: str | None = None,
    *,
    settings: TracingSettings | None = None,
) -> TracingPipeline:
    """Install the global tracing pipeline and structured logging.

    Args:
        service_name: ``service.name`` resource attribute. Falls back to
            ``settings.service_name`` and then to the distribution name.
        otlp_endpoint: OTLP/gRPC collector endpoint. Falls back to
            ``settings.otlp_endpoint`` and then to ``http://localhost:4317``.
        settings: Environment-derived settings; read from the environment
            when omitted.

    Returns:
        The installed :class:`TracingPipeline`.

    Raises:
        FilterParseError: The log filter directives are malformed.
        ExporterConfigError: The exporter cannot be built for the endpoint.
        AlreadyInitializedError: A tracer provider is already installed.
    """
    global _pipeline

    settings = settings or TracingSettings()
    service_name = service_name or settings.service_name or DISTRIBUTION_NAME
    endpoint = otlp_endpoint if otlp_endpoint is not None else settings.otlp_endpoint or DEFAULT_OTLP_ENDPOINT

    # Everything that can fail runs before global state is touched.
    log_filter = parse_filter(settings.log_filter)
    exporter = _build_exporter(endpoint)

    with _lock:
        if _pipeline is not None or _provider_installed():
            exporter.shutdown()
            raise AlreadyInitializedError(
                "a global tracer provider is already installed", service_name=service_name
            )

        propagator = TraceContextTextMapPropagator()
        propagate.set_global_textmap(propagator)

        resource = Resource.create({SERVICE_NAME: service_name, SERVICE_VERSION: __version__})
        provider = TracerProvider(resource=resource, sampler=ParentBased(ALWAYS_ON))
        provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)

        setup_logging(service_name, log_filter=log_filter, log_format=settings.log_format)

        _pipeline = TracingPipeline(
            tracer_provider=provider,
            tracer=provider.get_tracer(TRACER_NAME, __version__),
            propagator=propagator,
            resource=resource,
            endpoint=endpoint,
        )

    logger.info("tracing_initialized", service_name=service_name, otlp_endpoint=endpoint)
    return _pipeline


def get_pipeline() -> TracingPipeline | None:
    """Return the pipeline installed by :func:`init_tracing`, if any."""
    return _pipeline
