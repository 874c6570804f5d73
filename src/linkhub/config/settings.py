from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..graphql.client import GraphQLConfig
from ..http.config import DEFAULT_RETRY_COUNT, DEFAULT_RETRY_WAIT, DEFAULT_TIMEOUT, HttpConfig
from ..logging.setup import setup_logging


class LinkHubSettings(BaseSettings):
    """Client settings loaded from ``LINKHUB_*`` environment variables"""

    # Logging
    service_name: str = "linkhub"
    log_level: str = "INFO"
    log_format: str = "json"

    # HTTP
    http_base_url: str | None = None
    http_timeout: float = DEFAULT_TIMEOUT
    http_headers: dict[str, str] = Field(default_factory=dict)
    http_retry_count: int = DEFAULT_RETRY_COUNT
    http_retry_wait: float = DEFAULT_RETRY_WAIT

    # GraphQL
    graphql_endpoint: str = ""

    model_config = SettingsConfigDict(
        env_prefix="LINKHUB_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def http_config(self) -> HttpConfig:
        return HttpConfig(
            base_url=self.http_base_url,
            timeout=self.http_timeout,
            headers=self.http_headers,
            retry_count=self.http_retry_count,
            retry_wait=self.http_retry_wait,
        )

    def graphql_config(self, logger: Any = None) -> GraphQLConfig:
        return GraphQLConfig(endpoint=self.graphql_endpoint, http_config=self.http_config(), logger=logger)

    def configure_logging(self) -> None:
        setup_logging(level=self.log_level, format_type=self.log_format, service_name=self.service_name)


@lru_cache()
def get_settings() -> LinkHubSettings:
    """Get cached settings instance"""
    return LinkHubSettings()
