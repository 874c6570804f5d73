"""Structured logging utilities with correlation and tracing support."""

from .setup import (
    correlation_headers,
    get_correlation_id,
    get_logger,
    get_trace_id,
    set_correlation_id,
    set_trace_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_correlation_id",
    "get_trace_id",
    "set_correlation_id",
    "set_trace_id",
    "correlation_headers",
]
