from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
from pydantic import ConfigDict, Field, field_validator

from ..errors import ConfigurationError, GraphQLOperationError
from ..http.client import HttpClient
from ..http.config import ClientConfig, HttpConfig
from ..logging.setup import get_logger
from ..retry import RetryPolicy
from .executor import GraphQLExecutor

T = TypeVar("T")

DEFAULT_RETRY_COUNT = 3
DEFAULT_RETRY_WAIT = 1.0  # seconds
DEFAULT_RETRY_MAX_WAIT = 5.0  # seconds
DEFAULT_SERVER_ERROR_MIN = 500

GRAPHQL_RETRY_POLICY = RetryPolicy(
    count=DEFAULT_RETRY_COUNT,
    wait=DEFAULT_RETRY_WAIT,
    max_wait=DEFAULT_RETRY_MAX_WAIT,
    server_error_min=DEFAULT_SERVER_ERROR_MIN,
)

DEFAULT_LOGGER_NAME = "linkhub.graphql"


class GraphQLConfig(ClientConfig):
    """GraphQL client configuration"""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    endpoint: str = ""
    http_config: HttpConfig = Field(default_factory=HttpConfig)
    logger: Any = Field(default_factory=lambda: get_logger(DEFAULT_LOGGER_NAME))

    @field_validator("logger")
    @classmethod
    def _default_logger(cls, value: Any) -> Any:
        return value if value is not None else get_logger(DEFAULT_LOGGER_NAME)


class GraphQLClient:
    """GraphQL client whose operations run through a retrying HTTP transport

    The client owns its own HttpClient, built from ``config.http_config``
    with the GraphQL retry policy fixed at construction. Retries happen on
    transport errors and on statuses at or above the server error threshold.
    """

    def __init__(
        self,
        config: GraphQLConfig,
        *,
        retry_policy: RetryPolicy = GRAPHQL_RETRY_POLICY,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not config.endpoint or not config.endpoint.strip():
            raise ConfigurationError("endpoint cannot be empty", field="endpoint")

        self._endpoint = config.endpoint
        self._logger = config.logger
        self._http_client = HttpClient(
            config.http_config,
            retry_policy=retry_policy,
            logger=self._logger,
            transport=transport,
        )
        self._executor = GraphQLExecutor(self._http_client, self._endpoint)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def http_client(self) -> HttpClient:
        return self._http_client

    async def query(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        result_type: Any = None,
    ) -> Any:
        """Execute a GraphQL query, returning ``data`` or ``data`` validated into ``result_type``"""
        return await self._execute(lambda: self._executor.query(document, variables, result_type))

    async def mutate(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        result_type: Any = None,
    ) -> Any:
        """Execute a GraphQL mutation, returning ``data`` or ``data`` validated into ``result_type``"""
        return await self._execute(lambda: self._executor.mutate(document, variables, result_type))

    async def _execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        try:
            return await operation()
        except Exception as e:
            raise GraphQLOperationError(e) from e

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def __aenter__(self) -> "GraphQLClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_graphql_client(endpoint: str, **kwargs) -> GraphQLClient:
    """Factory function to create GraphQL client"""
    client_kwargs = {key: kwargs.pop(key) for key in ("retry_policy", "transport") if key in kwargs}
    return GraphQLClient(GraphQLConfig(endpoint=endpoint, **kwargs), **client_kwargs)
