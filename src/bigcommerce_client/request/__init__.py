"""Request execution pipeline: transport call, rate-limit retry, decoding, error mapping."""

from .decoder import (  # noqa: F401
    BodyFormat,
    Compression,
    DecodeFailure,
    DecodePlan,
    JsonBody,
    TextBody,
    classify_response,
    decode_body,
)
from .error_mapper import ResponseErrorMapper, extract_api_error  # noqa: F401
from .executor import Destination, PendingCall, RequestExecutor  # noqa: F401
from .retry_handler import Attempt, RetryDecision, RetryHandler  # noqa: F401

__all__ = [
    "RequestExecutor",
    "Destination",
    "PendingCall",
    "RetryHandler",
    "RetryDecision",
    "Attempt",
    "ResponseErrorMapper",
    "extract_api_error",
    "classify_response",
    "decode_body",
    "DecodePlan",
    "BodyFormat",
    "Compression",
    "JsonBody",
    "TextBody",
    "DecodeFailure",
]
