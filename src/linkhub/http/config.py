from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from ..errors import ConfigurationError

DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_RETRY_WAIT = 1.0  # seconds
DEFAULT_RETRY_COUNT = 0  # no retries
DEFAULT_RETRY_MAX_WAIT = 2.0  # backoff ceiling, raised to retry_wait when that is larger

_ZERO_DEFAULTS = {
    "timeout": DEFAULT_TIMEOUT,
    "retry_wait": DEFAULT_RETRY_WAIT,
}


class ClientConfig(BaseModel):
    """Base for client configurations, validation failures raise ConfigurationError"""

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or None
            raise ConfigurationError(f"Invalid {type(self).__name__}.{field}: {error['msg']}", field=field) from e


class HttpConfig(ClientConfig):
    """HTTP client configuration, durations in seconds"""

    model_config = ConfigDict(frozen=True)

    base_url: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    headers: dict[str, str] = Field(default_factory=dict)
    retry_count: int = Field(default=DEFAULT_RETRY_COUNT, ge=0)
    retry_wait: float = DEFAULT_RETRY_WAIT

    @field_validator("timeout", "retry_wait")
    @classmethod
    def _default_when_zero(cls, value: float, info: ValidationInfo) -> float:
        if value < 0:
            raise ValueError(f"{info.field_name} must not be negative")
        if value == 0:
            return _ZERO_DEFAULTS[info.field_name]
        return value
