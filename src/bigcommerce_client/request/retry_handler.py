"""
Rate-limit retry policy.

Only a 429 carrying a usable retry-after header is retry-eligible, and only
when fail_on_limit_reached is off. The executor allows a single retry.
"""

import math
from enum import Enum

from bigcommerce_client.config.value_objects import RetryConfig
from bigcommerce_client.ports.http import RawResponse

RATE_LIMIT_STATUS = 429


class Attempt(int, Enum):
    """Position of a request in the bounded retry state machine."""

    FIRST = 0
    RETRY = 1


class RetryDecision(str, Enum):
    PROCEED = "proceed"  # not rate limited, go on to decoding
    RETRY = "retry"
    FAIL_FAST = "fail_fast"


class RetryHandler:
    """Determines retry behavior for rate-limited responses."""

    def __init__(self, config: RetryConfig | None = None):
        self.config = config or RetryConfig()

    def parse_retry_after(self, response: RawResponse) -> float | None:
        """
        Read the retry-after header as fractional seconds.

        Returns:
            Seconds to wait, or None if the header is absent or unusable
        """
        raw = response.header(self.config.retry_after_header)
        if raw is None:
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return None
        if math.isnan(value) or math.isinf(value) or value < 0:
            return None
        return value

    def decide(self, response: RawResponse, attempt: Attempt) -> RetryDecision:
        """
        Classify a response for the retry state machine.

        Args:
            response: Raw response from the transport
            attempt: Which attempt produced the response

        Returns:
            RetryDecision for the executor
        """
        if response.status_code != RATE_LIMIT_STATUS:
            return RetryDecision.PROCEED

        # Without a retry-after value the response is not treated as rate limited
        if self.parse_retry_after(response) is None:
            return RetryDecision.PROCEED

        if self.config.fail_on_limit_reached:
            return RetryDecision.FAIL_FAST

        if attempt is Attempt.FIRST:
            return RetryDecision.RETRY

        return RetryDecision.PROCEED

    def get_retry_delay(self, retry_after: float) -> float:
        """Clamp the server-provided delay to the configured ceiling."""
        return min(retry_after, self.config.max_retry_delay)
