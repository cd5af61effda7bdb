"""Configuration value objects for dependency injection.

Instead of handing the whole BigCommerceConfig to every component, the
transport and executor receive the small frozen dataclasses they need.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for the aiohttp transport."""

    timeout: float = 60.0
    connect_timeout: float = 10.0
    verify_ssl: bool = True


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for rate-limit retry behavior."""

    fail_on_limit_reached: bool = False
    max_retry_delay: float = 5.0
    retry_after_header: str = "X-Retry-After"
