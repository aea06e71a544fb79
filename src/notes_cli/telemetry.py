"""OpenTelemetry tracing for the notes CLI.

A run creates one tracer provider, wraps the HTTP client so every request
carries W3C trace context headers, and flushes finished spans before exit.

Usage:
    with start_telemetry(settings) as telemetry:
        http = telemetry.instrument(httpx.Client())
        with telemetry.span("notes add"):
            http.post(...)
    # spans flushed here, whatever happened above

Telemetry never decides the outcome of a command: start, instrumentation and
shutdown failures are logged as warnings and the run continues untraced.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator

import httpx
from opentelemetry import propagate, trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from notes_cli import __version__
from notes_cli.logging import get_logger

if TYPE_CHECKING:
    from notes_cli.config import NotesSettings

logger = get_logger(__name__)

INSTRUMENTATION_NAME = "notes_cli"


class Telemetry:
    """Handle on the tracing pipeline for a single CLI run.

    Wraps a tracer provider. Without one the handle is a no-op: spans are
    non-recording and HTTP clients are left untouched.
    """

    def __init__(self, tracer_provider: trace.TracerProvider | None = None) -> None:
        self._provider: trace.TracerProvider = tracer_provider or trace.NoOpTracerProvider()
        self._closed = False

    @property
    def tracer_provider(self) -> trace.TracerProvider:
        return self._provider

    @property
    def enabled(self) -> bool:
        """Whether spans are recorded and propagated."""
        return not isinstance(self._provider, trace.NoOpTracerProvider)

    def instrument(self, client: httpx.Client) -> httpx.Client:
        """Attach tracing to the client's transport.

        Args:
            client: The HTTP client used for the run

        Returns:
            The same client, for chaining. Left untraced if instrumentation
            fails.
        """
        if not self.enabled:
            return client
        try:
            HTTPXClientInstrumentor().instrument_client(
                client, tracer_provider=self._provider
            )
        except Exception as e:
            logger.warning("Failed to instrument HTTP client", error=str(e))
        return client

    @contextmanager
    def span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> Iterator[trace.Span]:
        """Run the enclosed block inside a span.

        Exceptions are recorded on the span and re-raised.
        """
        tracer = self._provider.get_tracer(INSTRUMENTATION_NAME, __version__)
        with tracer.start_as_current_span(name, attributes=attributes) as span:
            yield span

    def shutdown(self) -> None:
        """Flush pending spans and release the exporter. Idempotent."""
        if self._closed:
            return
        self._closed = True

        shutdown = getattr(self._provider, "shutdown", None)
        if shutdown is None:
            return
        try:
            shutdown()
        except Exception as e:
            logger.warning("Failed to shutdown OpenTelemetry", error=str(e))

    def __enter__(self) -> "Telemetry":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


def _build_exporter(settings: "NotesSettings") -> SpanExporter | None:
    """Create the span exporter selected in settings (None means no export)."""
    if settings.telemetry_exporter == "none":
        return None
    if settings.telemetry_exporter == "console":
        # stdout carries command output, so spans go to stderr
        return ConsoleSpanExporter(out=sys.stderr)

    # Heavy import, only needed when exporting over OTLP
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

    return OTLPSpanExporter(endpoint=settings.otlp_endpoint)


def start_telemetry(settings: "NotesSettings") -> Telemetry:
    """Set up tracing for this run.

    Installs the W3C trace context and baggage propagators globally; the
    tracer provider itself stays on the returned handle.

    Args:
        settings: Application settings

    Returns:
        Telemetry handle; a no-op handle if setup failed
    """
    try:
        provider = TracerProvider(
            resource=Resource.create({SERVICE_NAME: settings.service_name}),
            shutdown_on_exit=False,
        )
        exporter = _build_exporter(settings)
        if exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(exporter))

        propagate.set_global_textmap(
            CompositePropagator(
                [TraceContextTextMapPropagator(), W3CBaggagePropagator()]
            )
        )
    except Exception as e:
        logger.warning("Failed to run OpenTelemetry", error=str(e))
        return Telemetry()

    logger.debug(
        "Telemetry started",
        service_name=settings.service_name,
        exporter=settings.telemetry_exporter,
    )
    return Telemetry(provider)
