"""
BigCommerce Client Exception Hierarchy

Every failure surfaced by the client is a ClientError subclass, so callers can
catch one type and still branch on ``kind`` or on the concrete class.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of client failures."""

    CONFIG = "config"
    NETWORK = "network"
    RATE_LIMIT = "rate_limit"
    API = "api"
    DECODE = "decode"
    VALIDATION = "validation"


class ClientError(Exception):
    """Base exception for all BigCommerce client errors."""

    kind: ErrorKind = ErrorKind.API

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retry_after: float | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.retry_after = retry_after
        self.response_body = response_body


class ConfigError(ClientError):
    """Bad construction arguments (missing host, credentials, secret)."""

    kind = ErrorKind.CONFIG


class NetworkError(ClientError):
    """Transport failure: connection reset, timeout, DNS failure."""

    kind = ErrorKind.NETWORK


class RateLimitError(ClientError):
    """429 - Rate limit reached while fail_on_limit_reached is set."""

    kind = ErrorKind.RATE_LIMIT


class ApiError(ClientError):
    """Non-2xx status, or an error declared inside the response JSON."""

    kind = ErrorKind.API


class DecodeError(ClientError):
    """Response body could not be decompressed or parsed."""

    kind = ErrorKind.DECODE


class ValidationError(ClientError):
    """Signed payload could not be parsed or authenticated."""

    kind = ErrorKind.VALIDATION
