"""
Logging for the linkhub clients.

Client loggers are structlog loggers named under the ``linkhub`` stdlib
namespace (``linkhub.http.client``, ``linkhub.graphql``). ``setup_logging``
only touches that namespace and the transport loggers below it, so an
application keeps control of its own root handlers.
"""

import contextvars
import logging
import sys
from typing import TextIO

import structlog
from pythonjsonlogger import jsonlogger
from structlog.stdlib import LoggerFactory

LIBRARY_LOGGER = "linkhub"
TRANSPORT_LOGGERS = ("httpx", "httpcore")

CORRELATION_ID_HEADER = "X-Correlation-ID"
TRACE_ID_HEADER = "X-Trace-ID"

_HEADERS = {"correlation_id": CORRELATION_ID_HEADER, "trace_id": TRACE_ID_HEADER}

_correlation_id_var = contextvars.ContextVar("correlation_id", default=None)
_trace_id_var = contextvars.ContextVar("trace_id", default=None)


def setup_logging(
    level: str = "INFO",
    format_type: str = "json",  # "json" or "console"
    service_name: str | None = None,
    transport_level: str = "WARNING",
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Route client logs (retry decisions, request debug lines) to ``stream``

    Args:
        level: Level for the ``linkhub`` namespace
        format_type: "json" renders one JSON object per line via python-json-logger,
            "console" uses structlog's console renderer
        service_name: Calling service, added to every entry when given
        transport_level: Level for the httpx/httpcore loggers
        stream: Destination, stdout by default

    Returns:
        The configured ``linkhub`` stdlib logger
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    if format_type == "json":
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        renderer = structlog.stdlib.render_to_log_kwargs
    else:
        handler.setFormatter(logging.Formatter("%(message)s"))
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    library_logger = logging.getLogger(LIBRARY_LOGGER)
    library_logger.handlers = [handler]
    library_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    library_logger.propagate = False

    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(getattr(logging, transport_level.upper(), logging.WARNING))

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        add_correlation_context(),
    ]
    if service_name:
        processors.append(add_service_context(service_name))
    processors.append(renderer)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )
    return library_logger


def add_service_context(service_name: str):
    """Add service context to all log entries"""

    def processor(logger, method_name, event_dict):
        event_dict["service"] = service_name
        return event_dict

    return processor


def add_correlation_context():
    """Add correlation and trace IDs from context"""

    def processor(logger, method_name, event_dict):
        event_dict.update(_context_ids())
        return event_dict

    return processor


def set_correlation_id(correlation_id: str | None) -> None:
    _correlation_id_var.set(correlation_id)


def set_trace_id(trace_id: str | None) -> None:
    _trace_id_var.set(trace_id)


def get_correlation_id() -> str | None:
    return _correlation_id_var.get()


def get_trace_id() -> str | None:
    return _trace_id_var.get()


def correlation_headers() -> dict[str, str]:
    """Headers propagating the current correlation and trace IDs to outbound requests"""
    ids = _context_ids()
    return {_HEADERS[key]: value for key, value in ids.items()}


def _context_ids() -> dict[str, str]:
    ids = {"correlation_id": get_correlation_id(), "trace_id": get_trace_id()}
    return {key: value for key, value in ids.items() if value}


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger, names should live under the ``linkhub`` namespace"""
    return structlog.get_logger(name)
