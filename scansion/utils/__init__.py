"""Utility helpers shared across the :mod:`scansion` package."""

from __future__ import annotations

from .logging_config import configure_logging, reset_logging
from .observability import (
    StructuredLoggerAdapter,
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)
from .syllables import estimate_stress_pattern, estimate_syllable_count

__all__ = [
    "configure_logging",
    "reset_logging",
    "estimate_stress_pattern",
    "estimate_syllable_count",
    "StructuredLoggerAdapter",
    "add_span_attributes",
    "create_counter",
    "create_histogram",
    "get_logger",
    "record_exception",
    "start_span",
]
