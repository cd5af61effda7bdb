"""
Signed payload verification.

BigCommerce sends a ``signed_payload`` query parameter to the app's load,
uninstall and remove-user callbacks:

    <base64 JSON payload>.<signature>

The signature is the lowercase hex HMAC-SHA256 of the payload under the app's
client secret. Stores send the hex digest itself base64-encoded and sign the
decoded JSON; both that form and a plain hex digest over the encoded payload
are accepted. Every candidate is compared with ``hmac.compare_digest`` and all
comparisons always run.
"""

import base64
import binascii
import hashlib
import hmac
import json
from dataclasses import dataclass
from typing import Any

from bigcommerce_client.exceptions import ConfigError, ValidationError
from bigcommerce_client.observability import get_auth_logger

SEPARATOR = "."


@dataclass(frozen=True)
class SignedPayload:
    encoded_payload: str
    encoded_signature: str


def _b64decode(value: str) -> bytes:
    """Decode standard or URL-safe base64, tolerating missing padding."""
    padded = value + "=" * (-len(value) % 4)
    if "-" in padded or "_" in padded:
        return base64.urlsafe_b64decode(padded)
    return base64.b64decode(padded, validate=True)


def parse_signed_payload(token: str | None) -> SignedPayload:
    """
    Split a token into its payload and signature halves.

    Raises:
        ValidationError: If the token is empty or not exactly two non-empty halves
    """
    if not token:
        raise ValidationError("The signed request is required.")

    parts = token.split(SEPARATOR)
    if len(parts) != 2 or not all(parts):
        raise ValidationError(
            "The signed request has an invalid format: expected exactly one "
            "full stop separating the payload and the signature."
        )

    return SignedPayload(encoded_payload=parts[0], encoded_signature=parts[1])


def _signature_candidates(encoded_signature: str) -> list[bytes]:
    candidates = [encoded_signature.encode("ascii", errors="replace")]
    try:
        candidates.append(_b64decode(encoded_signature))
    except (binascii.Error, ValueError):
        # Fixed-length filler keeps the comparison count constant.
        candidates.append(b"\x00" * 64)
    return candidates


def _hex_hmac(secret: str, message: bytes) -> bytes:
    return (
        hmac.new(secret.encode("utf-8"), message, hashlib.sha256)
        .hexdigest()
        .encode("ascii")
    )


def verify_signed_payload(token: str | None, secret: str) -> Any:
    """
    Authenticate a signed payload and return its JSON content.

    Args:
        token: ``<base64 payload>.<signature>`` string
        secret: App client secret used as the HMAC key

    Returns:
        The decoded JSON payload

    Raises:
        ValidationError: Missing token, malformed token, bad signature or bad payload
        ConfigError: If no secret is configured
    """
    signed = parse_signed_payload(token)

    if not secret:
        raise ConfigError("The client secret is required to verify a signed request.")

    try:
        payload_bytes = _b64decode(signed.encoded_payload)
    except (binascii.Error, ValueError):
        payload_bytes = None

    expected = (
        _hex_hmac(secret, signed.encoded_payload.encode("ascii", errors="replace")),
        _hex_hmac(secret, payload_bytes or b""),
    )

    matched = False
    for candidate in _signature_candidates(signed.encoded_signature):
        for digest in expected:
            matched |= hmac.compare_digest(digest, candidate)

    if not matched:
        get_auth_logger("signed-payload-verifier").warning(
            "signed_payload_rejected", reason="invalid_signature"
        )
        raise ValidationError("The signed request has an invalid signature.")

    if payload_bytes is None:
        raise ValidationError("The signed request payload is not valid base64.")

    try:
        return json.loads(payload_bytes.decode("utf-8"))
    except (ValueError, RecursionError) as e:
        raise ValidationError(f"The signed request payload is not valid JSON: {e}") from e
