from typing import Any

from pydantic import ValidationError

from ..errors import GraphQLResponseError, GraphQLStatusError, ResponseDecodeError
from ..http.client import HttpClient
from ..http.response import type_adapter


class GraphQLExecutor:
    """Executes GraphQL documents as ``{"query", "variables"}`` POSTs over an HttpClient"""

    def __init__(self, http_client: HttpClient, endpoint: str):
        self._http = http_client
        self._endpoint = endpoint

    async def query(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        result_type: Any = None,
    ) -> Any:
        return await self._run(self._document("query", document), variables, result_type)

    async def mutate(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        result_type: Any = None,
    ) -> Any:
        return await self._run(self._document("mutation", document), variables, result_type)

    @staticmethod
    def _document(operation: str, document: str) -> str:
        """Prefix selection-set shorthand with the operation keyword; queries may stay anonymous"""
        document = document.strip()
        if document.startswith("{") and operation != "query":
            return f"{operation}{document}"
        return document

    async def _run(self, document: str, variables: dict[str, Any] | None, result_type: Any) -> Any:
        payload: dict[str, Any] = {"query": document}
        if variables:
            payload["variables"] = variables

        response = await self._http.post(self._endpoint, payload)
        if response.status_code != 200:
            raise GraphQLStatusError(response.status_code, response.text)

        try:
            envelope = response.json()
        except ValueError as e:
            raise ResponseDecodeError(response.url, response.status_code, str(e)) from e
        if not isinstance(envelope, dict):
            raise GraphQLResponseError(f"Unexpected GraphQL response: {envelope!r}")

        errors = envelope.get("errors")
        if errors:
            raise GraphQLResponseError(_format_errors(errors), errors)

        data = envelope.get("data")
        if data is None:
            raise GraphQLResponseError("GraphQL response has no data")
        if result_type is None:
            return data

        try:
            return type_adapter(result_type).validate_python(data)
        except ValidationError as e:
            raise ResponseDecodeError(response.url, response.status_code, str(e)) from e


def _format_errors(errors: list) -> str:
    messages = [error.get("message", str(error)) if isinstance(error, dict) else str(error) for error in errors]
    return "; ".join(messages)
