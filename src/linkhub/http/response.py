import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Any, Generic, TypeVar

import httpx
from pydantic import TypeAdapter

T = TypeVar("T")


@lru_cache(maxsize=None)
def type_adapter(result_type: Any) -> TypeAdapter:
    """Cached pydantic adapter for a decode target type"""
    return TypeAdapter(result_type)


@dataclass(frozen=True)
class ClientResponse(Generic[T]):
    """Status, headers and body of a completed request plus its decoded result"""

    status_code: int
    headers: Mapping[str, str]
    content: bytes
    url: str
    elapsed: timedelta | None = None
    encoding: str | None = None
    result: T | None = None

    @classmethod
    def from_httpx(
        cls,
        response: httpx.Response,
        elapsed: timedelta | None = None,
        result: T | None = None,
    ) -> "ClientResponse[T]":
        return cls(
            status_code=response.status_code,
            headers=response.headers,
            content=response.content,
            url=str(response.url),
            elapsed=elapsed,
            encoding=response.encoding,
            result=result,
        )

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding or "utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content)
