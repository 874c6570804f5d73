# Assumptions:
# - Using pytest with pytest-asyncio
# - GraphQL endpoint served by httpx.MockTransport
# - Retry policy keeps the production count with zero backoff

import asyncio
import json
from datetime import datetime
from unittest.mock import Mock

import httpx
import pytest
from pydantic import BaseModel

from linkhub.errors import (
    ConfigurationError,
    GraphQLOperationError,
    GraphQLResponseError,
    GraphQLStatusError,
    InvalidRequestError,
    RequestFailedError,
    ResponseDecodeError,
)
from linkhub.graphql import (
    DEFAULT_RETRY_COUNT,
    DEFAULT_RETRY_MAX_WAIT,
    DEFAULT_RETRY_WAIT,
    DEFAULT_SERVER_ERROR_MIN,
    GRAPHQL_RETRY_POLICY,
    GraphQLClient,
    GraphQLConfig,
    create_graphql_client,
)
from linkhub.http import HttpConfig

ENDPOINT = "https://graphql.example.com/v1/graphql"

POOL_QUERY = "{ pool(id: $id) { id token0 token1 } }"


class Pool(BaseModel):
    id: str
    token0: str
    token1: str


class PoolData(BaseModel):
    pool: Pool


def _client(handler, policy, logger=None, **config_overrides) -> GraphQLClient:
    config = GraphQLConfig(endpoint=ENDPOINT, logger=logger, **config_overrides)
    return GraphQLClient(config, retry_policy=policy, transport=httpx.MockTransport(handler))


def _pool_response() -> httpx.Response:
    return httpx.Response(200, json={"data": {"pool": {"id": "0xpool", "token0": "WETH", "token1": "USDC"}}})


class TestGraphQLConfig:
    """Test cases for GraphQL configuration"""

    def test_retry_constants(self):
        assert DEFAULT_RETRY_COUNT == 3
        assert DEFAULT_RETRY_WAIT == 1.0
        assert DEFAULT_RETRY_MAX_WAIT == 5.0
        assert DEFAULT_SERVER_ERROR_MIN == 500
        assert GRAPHQL_RETRY_POLICY.count == 3
        assert GRAPHQL_RETRY_POLICY.server_error_min == 500

    def test_default_logger_is_injected(self):
        """Test that a usable logger exists when the caller supplies none"""
        assert GraphQLConfig(endpoint=ENDPOINT).logger is not None
        assert GraphQLConfig(endpoint=ENDPOINT, logger=None).logger is not None

    def test_supplied_logger_kept(self):
        logger = Mock()

        assert GraphQLConfig(endpoint=ENDPOINT, logger=logger).logger is logger

    def test_invalid_embedded_http_config_raises_configuration_error(self):
        """Test that nested HTTP settings fail with the same error kind as the retry policy"""
        with pytest.raises(ConfigurationError) as exc_info:
            GraphQLConfig(endpoint=ENDPOINT, http_config={"retry_count": -1})

        assert exc_info.value.field == "http_config.retry_count"


class TestGraphQLClientConstruction:
    """Test cases for GraphQL client construction"""

    @pytest.mark.parametrize("endpoint", ["", "   "])
    def test_empty_endpoint_fails_without_network(self, endpoint):
        """Test that an empty endpoint is a configuration error raised before any request"""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200)

        with pytest.raises(ConfigurationError, match="endpoint cannot be empty"):
            GraphQLClient(GraphQLConfig(endpoint=endpoint), transport=httpx.MockTransport(handler))

        assert calls == []

    def test_http_client_built_from_embedded_config(self):
        """Test that the embedded HTTP config and the GraphQL retry policy are applied"""
        config = GraphQLConfig(endpoint=ENDPOINT, http_config=HttpConfig(timeout=10, headers={"X-API-Key": "k"}))

        client = GraphQLClient(config)

        assert client.endpoint == ENDPOINT
        assert client.http_client.config.timeout == 10
        assert client.http_client.retry_policy is GRAPHQL_RETRY_POLICY

    def test_factory(self):
        client = create_graphql_client(ENDPOINT, http_config=HttpConfig(timeout=5))

        assert client.endpoint == ENDPOINT
        assert client.http_client.config.timeout == 5


class TestGraphQLOperations:
    """Test cases for query and mutate"""

    @pytest.mark.asyncio
    async def test_query_posts_document_and_variables(self, fast_graphql_policy):
        # Arrange
        payloads = []

        def handler(request: httpx.Request) -> httpx.Response:
            payloads.append(json.loads(request.content))
            return _pool_response()

        client = _client(handler, fast_graphql_policy)

        # Act
        data = await client.query(POOL_QUERY, {"id": "0xpool"})

        # Assert
        assert payloads == [{"query": POOL_QUERY, "variables": {"id": "0xpool"}}]
        assert data == {"pool": {"id": "0xpool", "token0": "WETH", "token1": "USDC"}}
        await client.aclose()

    @pytest.mark.asyncio
    async def test_query_decodes_into_result_type(self, fast_graphql_policy):
        client = _client(lambda request: _pool_response(), fast_graphql_policy)

        data = await client.query(POOL_QUERY, {"id": "0xpool"}, result_type=PoolData)

        assert data.pool.token0 == "WETH"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_mutate_prefixes_shorthand_document(self, fast_graphql_policy):
        # Arrange
        payloads = []

        def handler(request: httpx.Request) -> httpx.Response:
            payloads.append(json.loads(request.content))
            return httpx.Response(200, json={"data": {"addStar": {"starrable": {"id": "repo"}}}})

        client = _client(handler, fast_graphql_policy)

        # Act
        await client.mutate("{ addStar(input: $input) { starrable { id } } }", {"input": {"starrableId": "repo"}})
        await client.mutate("mutation AddStar { addStar { starrable { id } } }")

        # Assert
        assert payloads[0]["query"] == "mutation{ addStar(input: $input) { starrable { id } } }"
        assert payloads[1] == {"query": "mutation AddStar { addStar { starrable { id } } }"}
        await client.aclose()

    @pytest.mark.asyncio
    async def test_graphql_errors_wrapped(self, fast_graphql_policy):
        """Test that errors in the response envelope surface as operation failures"""
        response = httpx.Response(200, json={"data": None, "errors": [{"message": "pool not found"}]})
        client = _client(lambda request: response, fast_graphql_policy)

        with pytest.raises(GraphQLOperationError, match="graphql operation failed: pool not found") as exc_info:
            await client.query(POOL_QUERY, {"id": "missing"})

        cause = exc_info.value.__cause__
        assert isinstance(cause, GraphQLResponseError)
        assert cause.errors == [{"message": "pool not found"}]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_missing_data_wrapped(self, fast_graphql_policy):
        client = _client(lambda request: httpx.Response(200, json={}), fast_graphql_policy)

        with pytest.raises(GraphQLOperationError) as exc_info:
            await client.query(POOL_QUERY)

        assert isinstance(exc_info.value.__cause__, GraphQLResponseError)
        await client.aclose()

    @pytest.mark.asyncio
    async def test_malformed_body_wrapped(self, fast_graphql_policy):
        client = _client(lambda request: httpx.Response(200, content=b"<html>"), fast_graphql_policy)

        with pytest.raises(GraphQLOperationError) as exc_info:
            await client.query(POOL_QUERY)

        assert isinstance(exc_info.value.__cause__, ResponseDecodeError)
        await client.aclose()

    @pytest.mark.asyncio
    async def test_unencodable_variables_wrapped(self, fast_graphql_policy):
        """Test that variables that cannot be JSON encoded fail as an operation error without a request"""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return _pool_response()

        client = _client(handler, fast_graphql_policy)

        with pytest.raises(GraphQLOperationError) as exc_info:
            await client.query("{ swaps(since: $since) { id } }", {"since": datetime(2024, 1, 1)})

        cause = exc_info.value.__cause__
        assert isinstance(cause, InvalidRequestError)
        assert isinstance(cause.__cause__, TypeError)
        assert calls == []
        await client.aclose()

    @pytest.mark.asyncio
    async def test_invalid_endpoint_url_wrapped(self, fast_graphql_policy):
        config = GraphQLConfig(endpoint="https://graphql.example.com/\x00v1")
        client = GraphQLClient(config, retry_policy=fast_graphql_policy, transport=httpx.MockTransport(lambda r: _pool_response()))

        with pytest.raises(GraphQLOperationError) as exc_info:
            await client.query(POOL_QUERY)

        cause = exc_info.value.__cause__
        assert isinstance(cause, InvalidRequestError)
        assert cause.method == "POST"
        await client.aclose()


class TestGraphQLRetries:
    """Test cases for the retry-wrapped execution path"""

    @pytest.mark.asyncio
    async def test_retries_transport_error_then_succeeds(self, fast_graphql_policy, mock_logger):
        # Arrange
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("connection reset", request=request)
            return _pool_response()

        client = _client(handler, fast_graphql_policy, logger=mock_logger)

        # Act
        data = await client.query(POOL_QUERY, {"id": "0xpool"})

        # Assert
        assert data["pool"]["id"] == "0xpool"
        assert len(calls) == 2
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.args[0] == "retrying due to error"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_retries_server_error_then_succeeds(self, fast_graphql_policy, mock_logger):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) <= 2:
                return httpx.Response(502, text="bad gateway")
            return _pool_response()

        client = _client(handler, fast_graphql_policy, logger=mock_logger)

        data = await client.query(POOL_QUERY, {"id": "0xpool"})

        assert data["pool"]["token1"] == "USDC"
        assert len(calls) == 3
        assert mock_logger.warning.call_count == 2
        assert mock_logger.warning.call_args.args[0] == "retrying due to server error"
        await client.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [400, 401, 404, 429, 499])
    async def test_client_errors_not_retried(self, fast_graphql_policy, mock_logger, status_code):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(status_code, text="rejected")

        client = _client(handler, fast_graphql_policy, logger=mock_logger)

        with pytest.raises(GraphQLOperationError) as exc_info:
            await client.query(POOL_QUERY)

        assert len(calls) == 1
        assert exc_info.value.__cause__.status_code == status_code
        mock_logger.warning.assert_not_called()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_server_error_exhausts_retry_budget(self, fast_graphql_policy, mock_logger):
        """Test that attempts stop at count + 1 and the status error is kept as cause"""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503, text="unavailable")

        client = _client(handler, fast_graphql_policy, logger=mock_logger)

        with pytest.raises(GraphQLOperationError) as exc_info:
            await client.query(POOL_QUERY)

        assert len(calls) == DEFAULT_RETRY_COUNT + 1
        cause = exc_info.value.__cause__
        assert isinstance(cause, GraphQLStatusError)
        assert cause.status_code == 503
        await client.aclose()

    @pytest.mark.asyncio
    async def test_transport_error_exhausts_retry_budget(self, fast_graphql_policy, mock_logger):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectTimeout("connect timeout", request=request)

        client = _client(handler, fast_graphql_policy, logger=mock_logger)

        with pytest.raises(GraphQLOperationError) as exc_info:
            await client.mutate("{ ping }")

        assert len(calls) == DEFAULT_RETRY_COUNT + 1
        cause = exc_info.value.__cause__
        assert isinstance(cause, RequestFailedError)
        assert isinstance(cause.__cause__, httpx.ConnectTimeout)
        await client.aclose()

    @pytest.mark.asyncio
    async def test_concurrent_operations_retry_independently(self, fast_graphql_policy, mock_logger):
        """Test that concurrent operations on one client keep separate attempt counts and retry logs"""
        # Arrange
        attempts = {"pool": 0, "ping": 0}

        async def handler(request: httpx.Request) -> httpx.Response:
            operation = "pool" if "pool" in json.loads(request.content)["query"] else "ping"
            attempts[operation] += 1
            await asyncio.sleep(0.01)
            if operation == "pool" and attempts["pool"] <= 2:
                return httpx.Response(502, text="bad gateway")
            if operation == "ping" and attempts["ping"] == 1:
                return httpx.Response(503, text="unavailable")
            if operation == "ping":
                return httpx.Response(200, json={"data": {"ping": True}})
            return _pool_response()

        client = _client(handler, fast_graphql_policy, logger=mock_logger)

        # Act
        pool, ping = await asyncio.gather(
            client.query(POOL_QUERY, result_type=PoolData),
            client.mutate("{ ping }"),
        )

        # Assert
        assert pool.pool.id == "0xpool"
        assert ping == {"ping": True}
        assert attempts == {"pool": 3, "ping": 2}
        logged = [(call.kwargs["status_code"], call.kwargs["attempt"]) for call in mock_logger.warning.call_args_list]
        assert sorted(entry for entry in logged if entry[0] == 502) == [(502, 1), (502, 2)]
        assert [entry for entry in logged if entry[0] == 503] == [(503, 1)]
        assert len(logged) == 3
        assert client.http_client.retry_policy is fast_graphql_policy
        await client.aclose()
