"""
Tests for the pure decode pipeline: classify_response() and decode_body().
"""

import gzip
import zlib

import pytest

from bigcommerce_client.request.decoder import (
    BodyFormat,
    Compression,
    DecodeFailure,
    JsonBody,
    TextBody,
    classify_response,
    decode_body,
)


class TestClassifyResponse:
    @pytest.mark.parametrize(
        "content_type, expected",
        [
            ("application/json", BodyFormat.JSON),
            ("application/json; charset=utf-8", BodyFormat.JSON),
            ("application/problem+json", BodyFormat.JSON),
            ("application/xml", BodyFormat.TEXT),
            ("text/html", BodyFormat.TEXT),
            (None, BodyFormat.SNIFF),
            ("", BodyFormat.SNIFF),
        ],
    )
    def test_body_format(self, content_type, expected):
        assert classify_response(200, content_type, None).body_format is expected

    @pytest.mark.parametrize(
        "encoding, expected",
        [
            (None, Compression.NONE),
            ("identity", Compression.NONE),
            ("gzip", Compression.GZIP),
            ("GZIP", Compression.GZIP),
            ("deflate", Compression.DEFLATE),
            ("br", Compression.UNSUPPORTED),
        ],
    )
    def test_compression(self, encoding, expected):
        assert classify_response(200, "application/json", encoding).compression is expected

    def test_charset_parameter(self):
        plan = classify_response(200, 'text/plain; charset="ISO-8859-1"', None)
        assert plan.charset == "iso-8859-1"

    def test_success_flag(self):
        assert classify_response(204, None, None).is_success
        assert not classify_response(404, None, None).is_success


class TestDecodeBody:
    def test_json(self):
        plan = classify_response(200, "application/json", None)
        decoded = decode_body(plan, b'{"order": true}')
        assert decoded == JsonBody(value={"order": True}, raw='{"order": true}')

    def test_gzip_round_trip(self):
        value = {"items": [1, 2, 3], "name": "café"}
        plain = decode_body(
            classify_response(200, "application/json", None),
            b'{"items": [1, 2, 3], "name": "caf\\u00e9"}',
        )
        zipped = decode_body(
            classify_response(200, "application/json", "gzip"),
            gzip.compress(b'{"items": [1, 2, 3], "name": "caf\\u00e9"}'),
        )
        assert plain.value == zipped.value == value

    def test_zlib_and_raw_deflate(self):
        plan = classify_response(200, "application/json", "deflate")
        wrapped = zlib.compress(b"[1]")
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        raw = compressor.compress(b"[1]") + compressor.flush()

        assert decode_body(plan, wrapped).value == [1]
        assert decode_body(plan, raw).value == [1]

    def test_bad_gzip_is_failure(self):
        plan = classify_response(200, "application/json", "gzip")
        assert isinstance(decode_body(plan, b"nope"), DecodeFailure)

    def test_unsupported_encoding_is_failure(self):
        plan = classify_response(200, "application/json", "br")
        decoded = decode_body(plan, b"\x00\x01")
        assert isinstance(decoded, DecodeFailure)
        assert "br" in decoded.message

    def test_declared_json_parse_failure_on_success(self):
        plan = classify_response(200, "application/json", None)
        decoded = decode_body(plan, b"<html></html>")
        assert isinstance(decoded, DecodeFailure)
        assert decoded.raw == "<html></html>"

    def test_declared_json_parse_failure_on_error_falls_back_to_text(self):
        plan = classify_response(500, "application/json", None)
        assert decode_body(plan, b"<html></html>") == TextBody("<html></html>")

    def test_xml_is_returned_verbatim(self):
        plan = classify_response(200, "application/xml", None)
        assert decode_body(plan, b"<xml></xml>") == TextBody("<xml></xml>")

    def test_sniff_parses_json_or_returns_text(self):
        plan = classify_response(200, None, None)
        assert decode_body(plan, b'{"a": 1}').value == {"a": 1}
        assert decode_body(plan, b"plain words") == TextBody("plain words")

    def test_empty_body(self):
        plan = classify_response(204, "application/json", None)
        assert decode_body(plan, b"") == TextBody("")

    def test_bad_gzip_failure_keeps_bounded_preview(self):
        plan = classify_response(200, "application/json", "gzip")
        decoded = decode_body(plan, b"x" * 1000)
        assert isinstance(decoded, DecodeFailure)
        assert decoded.raw.startswith("b'xxx")
        assert decoded.raw.endswith("(1000 bytes)")
        assert len(decoded.raw) < 300


class TestJsonParserLimits:
    def test_oversized_integer_on_success_is_failure(self):
        plan = classify_response(200, "application/json", None)
        decoded = decode_body(plan, b"1" * 5000)
        assert isinstance(decoded, DecodeFailure)
        assert decoded.raw == "1" * 5000

    def test_deep_nesting_on_success_is_failure(self):
        plan = classify_response(200, "application/json", None)
        assert isinstance(decode_body(plan, b"[" * 100000), DecodeFailure)

    def test_oversized_integer_on_error_falls_back_to_text(self):
        plan = classify_response(500, "application/json", None)
        assert decode_body(plan, b"1" * 5000) == TextBody("1" * 5000)

    def test_sniffed_oversized_integer_is_text(self):
        plan = classify_response(200, None, None)
        assert decode_body(plan, b"1" * 5000) == TextBody("1" * 5000)
