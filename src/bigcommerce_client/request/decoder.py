"""
Response decode pipeline.

Turns raw response bytes into a tagged result. The branching is split in two
pure steps so it can be tested without any network I/O:

    classify_response(status, content_type, content_encoding) -> DecodePlan
    decode_body(plan, body_bytes) -> JsonBody | TextBody | DecodeFailure
"""

import json
import zlib
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class BodyFormat(str, Enum):
    """How the body text should be interpreted."""

    JSON = "json"  # declared JSON; parse failure matters
    TEXT = "text"  # XML, HTML, plain text: returned as-is
    SNIFF = "sniff"  # no content type; try JSON, fall back to text


class Compression(str, Enum):
    NONE = "identity"
    GZIP = "gzip"
    DEFLATE = "deflate"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class DecodePlan:
    """Outcome of classifying response metadata."""

    status_code: int
    body_format: BodyFormat
    compression: Compression
    charset: str = "utf-8"
    encoding_name: str | None = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class JsonBody:
    value: Any
    raw: str


@dataclass(frozen=True)
class TextBody:
    text: str


@dataclass(frozen=True)
class DecodeFailure:
    """Body could not be decoded where a well-formed one was expected."""

    message: str
    raw: str | None = None


Decoded = Union[JsonBody, TextBody, DecodeFailure]


def _parse_content_type(content_type: str | None) -> tuple[str | None, str]:
    """Split a Content-Type header into (mime type, charset)."""
    if not content_type:
        return None, "utf-8"

    parts = [p.strip() for p in content_type.split(";")]
    mime = parts[0].lower() or None
    charset = "utf-8"
    for param in parts[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            charset = value.strip().strip('"').lower()
    return mime, charset


def _is_json_mime(mime: str) -> bool:
    return mime == "application/json" or mime.endswith("+json") or mime == "text/json"


def _classify_encoding(content_encoding: str | None) -> Compression:
    if not content_encoding:
        return Compression.NONE
    encoding = content_encoding.strip().lower()
    if encoding in ("", "identity"):
        return Compression.NONE
    if encoding in ("gzip", "x-gzip"):
        return Compression.GZIP
    if encoding == "deflate":
        return Compression.DEFLATE
    return Compression.UNSUPPORTED


def classify_response(
    status_code: int,
    content_type: str | None,
    content_encoding: str | None,
) -> DecodePlan:
    """
    Decide how a response body must be decoded.

    Args:
        status_code: HTTP status code
        content_type: Content-Type header value, if any
        content_encoding: Content-Encoding header value, if any

    Returns:
        DecodePlan describing compression, body format and charset
    """
    mime, charset = _parse_content_type(content_type)

    if mime is None:
        body_format = BodyFormat.SNIFF
    elif _is_json_mime(mime):
        body_format = BodyFormat.JSON
    else:
        body_format = BodyFormat.TEXT

    return DecodePlan(
        status_code=status_code,
        body_format=body_format,
        compression=_classify_encoding(content_encoding),
        charset=charset,
        encoding_name=content_encoding,
    )


def decompress(body: bytes, compression: Compression) -> bytes:
    """Undo Content-Encoding.

    Raises:
        zlib.error: On corrupt compressed data
        ValueError: On an unsupported encoding
    """
    if compression is Compression.NONE or not body:
        return body
    if compression is Compression.GZIP:
        return zlib.decompress(body, 16 + zlib.MAX_WBITS)
    if compression is Compression.DEFLATE:
        # Servers send both zlib-wrapped and raw deflate streams.
        try:
            return zlib.decompress(body)
        except zlib.error:
            return zlib.decompress(body, -zlib.MAX_WBITS)
    raise ValueError("unsupported content encoding")


PREVIEW_BYTES = 256


def _preview(body: bytes) -> str:
    """Bounded repr of undecodable bytes for error reports."""
    preview = repr(body[:PREVIEW_BYTES])
    if len(body) > PREVIEW_BYTES:
        preview += f"... ({len(body)} bytes)"
    return preview


def _to_text(body: bytes, charset: str) -> str:
    try:
        return body.decode(charset, errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def decode_body(plan: DecodePlan, body: bytes) -> Decoded:
    """
    Decode raw body bytes according to a DecodePlan.

    Returns:
        JsonBody when JSON was parsed, TextBody for raw text, DecodeFailure
        when decompression failed or declared JSON on a 2xx did not parse
    """
    try:
        data = decompress(body, plan.compression)
    except (zlib.error, ValueError) as e:
        return DecodeFailure(
            message=f"Failed to decompress response body ({plan.encoding_name}): {e}",
            raw=_preview(body),
        )

    text = _to_text(data, plan.charset)

    # 204 and friends
    if not text.strip():
        return TextBody(text)

    if plan.body_format is BodyFormat.TEXT:
        return TextBody(text)

    # ValueError also covers the int digit limit; RecursionError is deep nesting
    try:
        return JsonBody(value=json.loads(text), raw=text)
    except (ValueError, RecursionError) as e:
        if plan.body_format is BodyFormat.JSON and plan.is_success:
            return DecodeFailure(message=str(e), raw=text)
        return TextBody(text)
