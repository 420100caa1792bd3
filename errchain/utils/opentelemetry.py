"""\
OpenTelemetry
=============

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Sunday, October 18 2026

This module provides `OpenTelemetry` integration for error chains. It
records a chain on a span the same way an exception is recorded, with
the chain's code and messages as attributes and the captured stack as
the exception stack trace, so tracing backends show where the error was
built rather than where it was last re-raised.
"""

from __future__ import annotations

import typing as t

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter,
)
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.trace import Status
from opentelemetry.trace import StatusCode

from errchain.core import unwrap
from errchain.core.chain import Link
from errchain.core.config import resolve

if t.TYPE_CHECKING:
    from opentelemetry.trace import Span

    from errchain.core.config import Config

__all__: list[str] = ["get_tracer", "record_error"]


def get_tracer(
    config: Config | None = None,
    name: str | None = None,
) -> trace.Tracer:
    """Configure and return a tracer.

    This function sets up `OpenTelemetry TracerProvider` based on the
    telemetry configuration. Spans are exported to the console in debug
    mode and through OTLP otherwise.

    :param config: Configuration object to initialise the tracer with,
        defaults to `settings`.
    :param name: Override for the service name, defaults to `None`. If
        not provided, uses the name from the configuration.
    :return: A configured `OpenTelemetry Tracer` instance.
    """
    config = resolve(config)
    service = name or config.telemetry.name or config.name
    resource = Resource.create(
        {
            "service.name": service,
            "service.version": config.version,
            "deployment.environment": (
                "development" if config.debug else "production"
            ),
            "telemetry.sdk.name": "errchain",
        }
    )
    provider = TracerProvider(resource=resource)
    if config.telemetry.enabled:
        if config.debug:
            processor = SimpleSpanProcessor(ConsoleSpanExporter())
        else:
            processor = BatchSpanProcessor(OTLPSpanExporter())
        provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)
    return trace.get_tracer(service)


def record_error(
    error: BaseException,
    span: Span | None = None,
    *,
    config: Config | None = None,
) -> None:
    """Record an error on a span and mark the span as failed.

    Error chains add `error.code`, `error.message` and
    `error.dev_message` attributes, and their captured stack replaces
    the Python traceback as `exception.stacktrace`. Other exceptions
    are recorded as they are.

    :param error: The error to record.
    :param span: Span to record on, defaults to the current span.
    :param config: Configuration providing the default code, defaults
        to `settings`.
    """
    if span is None:
        span = trace.get_current_span()
    if not isinstance(error, Link):
        span.record_exception(error)
        span.set_status(Status(StatusCode.ERROR, str(error)))
        return
    code = unwrap.code(error, config=config)
    span.set_attributes(
        {
            "error.code": code,
            "error.message": unwrap.message(error),
            "error.dev_message": unwrap.dev_message(error),
        }
    )
    span.record_exception(
        error,
        attributes={"exception.stacktrace": unwrap.stack(error)},
    )
    span.set_status(Status(StatusCode.ERROR, code))
