"""GraphQL client built on the retrying HTTP client."""

from .client import (
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_MAX_WAIT,
    DEFAULT_RETRY_WAIT,
    DEFAULT_SERVER_ERROR_MIN,
    GRAPHQL_RETRY_POLICY,
    GraphQLClient,
    GraphQLConfig,
    create_graphql_client,
)
from .executor import GraphQLExecutor

__all__ = [
    "GraphQLClient",
    "GraphQLConfig",
    "GraphQLExecutor",
    "create_graphql_client",
    "GRAPHQL_RETRY_POLICY",
    "DEFAULT_RETRY_COUNT",
    "DEFAULT_RETRY_WAIT",
    "DEFAULT_RETRY_MAX_WAIT",
    "DEFAULT_SERVER_ERROR_MIN",
]
