"""
Error Mapper

Maps a decoded response to the client's exception taxonomy, picking the most
specific message available from the body.
"""

import json
from typing import Any

from bigcommerce_client.exceptions import ApiError, ClientError, DecodeError, RateLimitError
from bigcommerce_client.request.decoder import Decoded, DecodeFailure, JsonBody, TextBody


def _error_item_text(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        for key in ("message", "title", "error", "detail"):
            value = item.get(key)
            if isinstance(value, str) and value:
                return value
    return json.dumps(item, sort_keys=True, default=str)


def extract_api_error(value: Any) -> str | None:
    """
    Extract an API-declared error message from a parsed JSON body.

    Recognizes a non-empty string ``error`` field and a non-empty ``errors``
    collection (list of strings/objects or a field -> message mapping).

    Returns:
        Joined error text, or None if the body declares no error
    """
    if not isinstance(value, dict):
        return None

    error = value.get("error")
    if isinstance(error, str) and error:
        return error

    errors = value.get("errors")
    if isinstance(errors, dict) and errors:
        return "; ".join(
            f"{field}: {_error_item_text(detail)}" for field, detail in errors.items()
        )
    if isinstance(errors, (list, tuple)) and errors:
        return "; ".join(_error_item_text(item) for item in errors)

    return None


class ResponseErrorMapper:
    """Maps decoded responses to exceptions."""

    @staticmethod
    def rate_limited(retry_after: float) -> RateLimitError:
        return RateLimitError(
            "You have reached the rate limit for the BigCommerce API. "
            f"Please retry in {retry_after} seconds.",
            status_code=429,
            retry_after=retry_after,
        )

    @staticmethod
    def map_response(
        status_code: int,
        decoded: Decoded,
        retry_after: float | None = None,
    ) -> ClientError | None:
        """
        Map a decoded response to an exception.

        Args:
            status_code: HTTP status code
            decoded: Result of the decode pipeline
            retry_after: Parsed retry-after value, attached when present

        Returns:
            The exception to raise, or None when the response is a success
        """
        is_success = 200 <= status_code < 300

        if isinstance(decoded, DecodeFailure):
            return DecodeError(
                decoded.message,
                status_code=status_code,
                retry_after=retry_after,
                response_body=decoded.raw,
            )

        api_message = None
        raw = None
        if isinstance(decoded, JsonBody):
            api_message = extract_api_error(decoded.value)
            raw = decoded.raw
        elif isinstance(decoded, TextBody):
            raw = decoded.text

        if is_success:
            if api_message is None:
                return None
            return ApiError(
                api_message,
                status_code=status_code,
                response_body=raw,
            )

        message = f"Request returned error code {status_code}"
        if api_message:
            message = f"{message}: {api_message}"
        return ApiError(
            message,
            status_code=status_code,
            retry_after=retry_after,
            response_body=raw,
        )
