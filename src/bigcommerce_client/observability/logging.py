"""
Structured logging for bigcommerce-client.
Provides consistent, machine-readable logs for every outbound call.

Log Structure:
    {
        "app": "bigcommerce-client",   # Library identifier
        "layer": "transport",          # Architectural layer
        "component": "request-executor",
        "module": "...",               # Python module (optional)
        "host": "api.bigcommerce.com", # Domain context
        "event": "request_completed",  # What happened
        ...
    }

Architectural Layers:
    - transport: HTTP transport and request execution
    - auth: OAuth handshake and signed payload verification
    - client: Store-level API client
"""

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict

Layer = Literal["transport", "auth", "client"]

# Header and body keys that never reach a log line.
SENSITIVE_KEYS = frozenset(
    {"x-auth-token", "authorization", "client_secret", "secret", "access_token"}
)


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the library identifier to every log entry."""
    event_dict["app"] = "bigcommerce-client"
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Add severity level for cloud logging compatibility.
    Maps Python log levels to standard severity levels.
    """
    level = event_dict.get("level")
    if level:
        severity_map = {
            "debug": "DEBUG",
            "info": "INFO",
            "warning": "WARNING",
            "error": "ERROR",
            "critical": "CRITICAL",
        }
        event_dict["severity"] = severity_map.get(level, "INFO")
    return event_dict


def redact_sensitive(obj: Any) -> Any:
    """Replace values of credential-bearing keys with a placeholder."""
    if isinstance(obj, dict):
        return {
            k: "***" if str(k).lower() in SENSITIVE_KEYS else redact_sensitive(v)
            for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [redact_sensitive(v) for v in obj]
    return obj


def redact_event(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Processor form of redact_sensitive."""
    return redact_sensitive(event_dict)


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON. If False, use human-readable format (dev mode).
        include_timestamp: Whether to include ISO timestamps in logs

    Usage:
        >>> from bigcommerce_client.observability import setup_logging
        >>> setup_logging(level="DEBUG", json_logs=True)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        redact_event,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_config(config: Any, json_logs: bool = True) -> None:
    """Configure logging at the level carried by a BigCommerceConfig."""
    setup_logging(level=config.log_level, json_logs=json_logs)


def get_logger(
    name: str | None = None,
    layer: Layer | None = None,
    component: str | None = None,
    **initial_context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance with architectural context.

    Args:
        name: Logger name (typically __name__ of the calling module)
        layer: Architectural layer (transport, auth, client)
        component: Specific component within the layer
        **initial_context: Additional context key-value pairs to bind to logger

    Usage:
        >>> log = get_logger(__name__, layer="transport", component="request-executor")
        >>> log.info("request_completed", status_code=200)
    """
    logger = structlog.get_logger(name)

    context = {}

    if layer:
        context["layer"] = layer

    if component:
        context["component"] = component

    if name:
        context["module"] = name

    context.update(initial_context)

    if context:
        logger = logger.bind(**context)

    return logger


def get_transport_logger(
    component: str,
    host: str | None = None,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for the transport layer.

    Usage:
        >>> log = get_transport_logger("request-executor", host="api.bigcommerce.com")
        >>> log.warning("rate_limited_retrying", retry_after=0.5)
    """
    ctx = {}
    if host:
        ctx["host"] = host
    ctx.update(context)

    return get_logger("transport", layer="transport", component=component, **ctx)


def get_auth_logger(component: str, **context: Any) -> structlog.stdlib.BoundLogger:
    """Get a logger for the auth layer (OAuth, signed payloads)."""
    return get_logger("auth", layer="auth", component=component, **context)


def get_client_logger(
    component: str = "api-client",
    store_hash: str | None = None,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """Get a logger for the store-level API client."""
    ctx = {}
    if store_hash:
        ctx["store_hash"] = store_hash
    ctx.update(context)

    return get_logger("client", layer="client", component=component, **ctx)
