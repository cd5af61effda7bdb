"""Configuration for the BigCommerce client."""

from .state import (  # noqa: F401
    DEFAULT_API_URL,
    DEFAULT_LOGIN_URL,
    BigCommerceConfig,
    ConfigLoader,
    build_config,
)
from .value_objects import HttpClientConfig, RetryConfig  # noqa: F401

__all__ = [
    "BigCommerceConfig",
    "ConfigLoader",
    "build_config",
    "HttpClientConfig",
    "RetryConfig",
    "DEFAULT_API_URL",
    "DEFAULT_LOGIN_URL",
]
