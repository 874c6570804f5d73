"""
Retry execution path shared by the HTTP and GraphQL clients.

A ``RetryPolicy`` is fixed when a client is constructed. Every call builds
its own ``tenacity.AsyncRetrying`` from that policy, so retry state is never
shared between concurrent requests.
"""

from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_base,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from .errors import ConfigurationError


@dataclass(frozen=True)
class RetryPolicy:
    """Retry count, backoff bounds and the status threshold that marks a server error"""

    count: int
    wait: float
    max_wait: float
    server_error_min: int | None = None  # None: status codes never trigger a retry

    def __post_init__(self):
        if self.count < 0:
            raise ConfigurationError("retry count must not be negative", field="count")
        if self.wait < 0:
            raise ConfigurationError("retry wait must not be negative", field="wait")
        if self.max_wait < self.wait:
            raise ConfigurationError("retry max wait must not be below retry wait", field="max_wait")

    @property
    def max_attempts(self) -> int:
        return self.count + 1

    def should_retry(self, response: httpx.Response | None, error: BaseException | None) -> bool:
        """Decide whether an attempt that produced ``response`` or ``error`` is retried"""
        if error is not None:
            return isinstance(error, httpx.TransportError)
        if response is not None and self.server_error_min is not None:
            return response.status_code >= self.server_error_min
        return False


class RetryCondition(retry_base):
    """tenacity retry strategy applying a ``RetryPolicy`` and logging each decision"""

    def __init__(self, policy: RetryPolicy, logger: Any):
        self.policy = policy
        self.logger = logger

    def __call__(self, retry_state: RetryCallState) -> bool:
        outcome = retry_state.outcome
        if outcome.failed:
            error, response = outcome.exception(), None
        else:
            error, response = None, outcome.result()

        if not self.policy.should_retry(response, error):
            return False

        if error is not None:
            self.logger.warning(
                "retrying due to error",
                error=str(error) or type(error).__name__,
                attempt=retry_state.attempt_number,
                max_attempts=self.policy.max_attempts,
            )
        else:
            self.logger.warning(
                "retrying due to server error",
                status_code=response.status_code,
                attempt=retry_state.attempt_number,
                max_attempts=self.policy.max_attempts,
            )
        return True


def _final_outcome(retry_state: RetryCallState) -> Any:
    # Last response when retries ran out on status, re-raises the last error otherwise
    return retry_state.outcome.result()


def backoff(policy: RetryPolicy):
    """Exponential backoff from ``wait`` capped at ``max_wait``, plus up to ``wait`` of jitter"""
    return wait_exponential(multiplier=policy.wait, max=policy.max_wait) + wait_random(0, policy.wait)


def build_retrying(policy: RetryPolicy, logger: Any) -> AsyncRetrying:
    """Create the per-call tenacity controller for ``policy``"""
    return AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=backoff(policy),
        retry=RetryCondition(policy, logger),
        retry_error_callback=_final_outcome,
    )
