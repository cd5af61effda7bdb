"""
Async client for the BigCommerce REST API.

Two independent pieces do the real work: RequestExecutor, which issues calls,
retries once on rate limiting and normalizes every failure into the
ClientError taxonomy, and verify_signed_payload, which authenticates the
signed payloads BigCommerce sends during app install and load.
"""

__version__ = "0.1.0"

from .client import BigCommerce  # noqa: E402
from .config import BigCommerceConfig, ConfigLoader  # noqa: E402
from .exceptions import (  # noqa: E402
    ApiError,
    ClientError,
    ConfigError,
    DecodeError,
    ErrorKind,
    NetworkError,
    RateLimitError,
    ValidationError,
)
from .request import RequestExecutor  # noqa: E402
from .verifier import verify_signed_payload  # noqa: E402

__all__ = [
    "BigCommerce",
    "BigCommerceConfig",
    "ConfigLoader",
    "RequestExecutor",
    "verify_signed_payload",
    "ClientError",
    "ErrorKind",
    "ConfigError",
    "NetworkError",
    "RateLimitError",
    "ApiError",
    "DecodeError",
    "ValidationError",
]
