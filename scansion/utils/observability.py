"""Logging, metrics and tracing helpers used across the scansion package.

Metrics are exported through :mod:`prometheus_client` and spans through the
OpenTelemetry API. Without a configured OpenTelemetry SDK the tracer is the
API's no-op implementation, so instrumented code paths cost almost nothing
when nobody is collecting.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, Optional

from opentelemetry import trace
from prometheus_client import Counter, Histogram

_TRACER_NAME = "scansion"

# Collectors created through this module, by metric name.
_COLLECTORS: Dict[str, Any] = {}


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Adapter that renders bound and per-call context inline with messages."""

    def bind(self, **context: Any) -> "StructuredLoggerAdapter":
        merged = dict(self.extra or {})
        merged.update(context)
        return StructuredLoggerAdapter(self.logger, merged)

    def process(self, msg: str, kwargs: Dict[str, Any]):
        event_context: Dict[str, Any] = dict(self.extra or {})
        provided = kwargs.pop("context", None)
        if isinstance(provided, dict):
            event_context.update(provided)
        if event_context:
            try:
                payload = json.dumps(event_context, sort_keys=True, default=str)
            except TypeError:
                payload = json.dumps({str(k): str(v) for k, v in event_context.items()})
            msg = f"{msg} | {payload}"
        return msg, kwargs


def get_logger(name: str, **context: Any) -> StructuredLoggerAdapter:
    """Return a project logger with optional bound context."""

    return StructuredLoggerAdapter(logging.getLogger(name), context)


def _collector(
    factory: Callable[..., Any],
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]],
) -> Any:
    existing = _COLLECTORS.get(name)
    if existing is not None:
        return existing

    labels = tuple(label_names or ())
    try:
        collector = factory(name, documentation, labelnames=labels)
    except ValueError:
        # Name already taken in the default registry by code outside this
        # module (for example after a reload); keep counting, unexported.
        get_logger(__name__).warning(
            "Metric name already registered; using an unregistered collector",
            context={"metric": name},
        )
        collector = factory(name, documentation, labelnames=labels, registry=None)
    _COLLECTORS[name] = collector
    return collector


def create_counter(
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]] = None,
) -> Counter:
    """Create a counter, reusing one this module already created under ``name``."""

    return _collector(Counter, name, documentation, label_names)


def create_histogram(
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]] = None,
) -> Histogram:
    """Create a histogram, reusing one this module already created under ``name``."""

    return _collector(Histogram, name, documentation, label_names)


@contextmanager
def start_span(name: str, attributes: Optional[Dict[str, Any]] = None) -> Iterator[Any]:
    """Start an OpenTelemetry span named ``name`` with optional attributes."""

    tracer = trace.get_tracer(_TRACER_NAME)
    with tracer.start_as_current_span(name) as span:
        if attributes:
            add_span_attributes(span, attributes)
        yield span


def add_span_attributes(span: Any, attributes: Dict[str, Any]) -> None:
    """Attach ``attributes`` to ``span``; non-string keys are ignored."""

    if span is None:
        return
    for key, value in attributes.items():
        if isinstance(key, str):
            span.set_attribute(key, value)


def record_exception(span: Any, error: BaseException) -> None:
    """Record ``error`` on an active span and flag the span as failed."""

    if span is None:
        return
    span.record_exception(error)
    span.set_attribute("error", True)


__all__ = [
    "StructuredLoggerAdapter",
    "get_logger",
    "create_counter",
    "create_histogram",
    "start_span",
    "add_span_attributes",
    "record_exception",
]
