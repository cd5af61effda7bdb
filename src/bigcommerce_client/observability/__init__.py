"""
Structured logging for the BigCommerce client. Every outbound call, rate-limit
retry and handshake failure is emitted as a structlog event so it can be
aggregated alongside the host application's own logs.
"""

from .logging import (
    get_auth_logger,
    get_client_logger,
    get_logger,
    get_transport_logger,
    redact_sensitive,
    setup_logging,
    setup_logging_from_config,
)

__all__ = [
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    "get_transport_logger",
    "get_auth_logger",
    "get_client_logger",
    "redact_sensitive",
]
