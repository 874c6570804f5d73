"""HTTP client utilities with default configuration and retry support."""

from .client import HttpClient, create_http_client
from .config import (
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_MAX_WAIT,
    DEFAULT_RETRY_WAIT,
    DEFAULT_TIMEOUT,
    HttpConfig,
)
from .response import ClientResponse

__all__ = [
    "HttpClient",
    "HttpConfig",
    "ClientResponse",
    "create_http_client",
    "DEFAULT_TIMEOUT",
    "DEFAULT_RETRY_WAIT",
    "DEFAULT_RETRY_COUNT",
    "DEFAULT_RETRY_MAX_WAIT",
]
