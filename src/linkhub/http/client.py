import time
from collections.abc import Callable, Mapping
from datetime import timedelta
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from ..errors import ConfigurationError, InvalidRequestError, RequestFailedError, ResponseDecodeError
from ..logging.setup import correlation_headers
from ..retry import RetryPolicy, build_retrying
from .config import DEFAULT_RETRY_COUNT, DEFAULT_RETRY_MAX_WAIT, DEFAULT_TIMEOUT, HttpConfig
from .response import ClientResponse, type_adapter

_EVENT_HOOK_KINDS = ("request", "response")


class HttpClient:
    """HTTP client owning one pooled transport, with defaults and transport-level retries

    Non-2xx responses are returned, not raised. The result type is only
    decoded for 2xx responses.
    """

    def __init__(
        self,
        config: HttpConfig | None = None,
        *,
        retry_policy: RetryPolicy | None = None,
        logger: Any = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config if config is not None else HttpConfig()
        self._retry_policy = retry_policy or self._policy_from_config(self._config)
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

        client_kwargs = {
            "timeout": self._config.timeout,
            "headers": self._config.headers,
        }
        if self._config.base_url:
            client_kwargs["base_url"] = self._config.base_url
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.AsyncClient(**client_kwargs)

    @staticmethod
    def _policy_from_config(config: HttpConfig) -> RetryPolicy | None:
        """Retries only activate when a positive retry count is configured"""
        if config.retry_count <= 0:
            return None
        return RetryPolicy(
            count=config.retry_count,
            wait=config.retry_wait,
            max_wait=max(DEFAULT_RETRY_MAX_WAIT, config.retry_wait),
        )

    @property
    def config(self) -> HttpConfig:
        return self._config

    @property
    def retry_policy(self) -> RetryPolicy | None:
        return self._retry_policy

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def update_headers(self, headers: Mapping[str, str]) -> None:
        """Merge headers into the defaults sent with every request"""
        self._client.headers.update(headers)

    def add_event_hook(self, kind: str, hook: Callable[..., Any]) -> None:
        """Register an httpx event hook ("request" or "response")"""
        if kind not in _EVENT_HOOK_KINDS:
            raise ConfigurationError(f"Unknown event hook kind: {kind}", field="kind")
        self._client.event_hooks[kind].append(hook)

    async def get(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
        result_type: Any = None,
    ) -> ClientResponse:
        """Make GET request"""
        return await self.request("GET", url, params=params, result_type=result_type)

    async def post(
        self,
        url: str,
        body: Any = None,
        result_type: Any = None,
    ) -> ClientResponse:
        """Make POST request"""
        return await self.request("POST", url, body=body, result_type=result_type)

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        result_type: Any = None,
    ) -> ClientResponse:
        """Make HTTP request through the retry path and decode the body into ``result_type``"""
        method = method.upper()
        try:
            request = self._client.build_request(
                method,
                url,
                params=params,
                headers=correlation_headers(),
                **self._encode_body(body),
            )
        except (TypeError, ValueError, httpx.InvalidURL) as e:
            raise InvalidRequestError(method, url, str(e)) from e
        self._logger.debug("Making HTTP request", method=method, url=str(request.url))

        started = time.perf_counter()
        try:
            response = await self._send(request)
        except httpx.RequestError as e:
            raise RequestFailedError(method, str(request.url), str(e) or type(e).__name__) from e
        elapsed = timedelta(seconds=time.perf_counter() - started)

        self._logger.debug(
            "HTTP response received",
            method=method,
            url=str(request.url),
            status_code=response.status_code,
            response_time_ms=elapsed.total_seconds() * 1000,
        )
        return ClientResponse.from_httpx(response, elapsed, self._decode(response, result_type))

    async def _send(self, request: httpx.Request) -> httpx.Response:
        if self._retry_policy is None:
            return await self._client.send(request)
        retrying = build_retrying(self._retry_policy, self._logger)
        return await retrying(self._client.send, request)

    @staticmethod
    def _encode_body(body: Any) -> dict[str, Any]:
        if body is None:
            return {}
        if isinstance(body, (bytes, str)):
            return {"content": body}
        if isinstance(body, BaseModel):
            return {"json": body.model_dump(mode="json", by_alias=True, exclude_none=True)}
        return {"json": body}

    @staticmethod
    def _decode(response: httpx.Response, result_type: Any) -> Any:
        if result_type is None or not response.is_success:
            return None
        if not response.content:
            raise ResponseDecodeError(str(response.url), response.status_code, "empty response body")
        try:
            return type_adapter(result_type).validate_json(response.content)
        except ValidationError as e:
            raise ResponseDecodeError(str(response.url), response.status_code, str(e)) from e

    async def aclose(self) -> None:
        """Close the underlying transport and release pooled connections"""
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_http_client(
    base_url: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    retry_count: int = DEFAULT_RETRY_COUNT,
    **kwargs,
) -> HttpClient:
    """Factory function to create HTTP client"""
    client_kwargs = {key: kwargs.pop(key) for key in ("retry_policy", "logger", "transport") if key in kwargs}
    config = HttpConfig(base_url=base_url, timeout=timeout, retry_count=retry_count, **kwargs)
    return HttpClient(config, **client_kwargs)
