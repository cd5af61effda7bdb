"""
Shared fixtures for the BigCommerce client tests.
"""

import gzip
import json
import logging
import sys
from pathlib import Path

import pytest

# Ensure src on path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from bigcommerce_client.ports.http import RawResponse  # noqa: E402

logger = logging.getLogger(__name__)


class FakeTransport:
    """IHttpTransport double replaying scripted responses.

    Each scripted item is either a RawResponse or an exception to raise.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.calls: list[dict] = []
        self.closed = False

    async def send(self, method, url, headers, body=None):
        self.calls.append(
            {"method": method, "url": url, "headers": headers, "body": body}
        )
        if not self.script:
            raise AssertionError(f"Unexpected extra request: {method} {url}")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self):
        self.closed = True


def json_response(status_code=200, payload=None, headers=None, gzipped=False):
    body = json.dumps(payload if payload is not None else {}).encode("utf-8")
    all_headers = {"Content-Type": "application/json"}
    if gzipped:
        body = gzip.compress(body)
        all_headers["Content-Encoding"] = "gzip"
    all_headers.update(headers or {})
    return RawResponse(status_code=status_code, headers=all_headers, body=body)


def text_response(status_code=200, text="", content_type="application/xml", headers=None):
    all_headers = {"Content-Type": content_type} if content_type else {}
    all_headers.update(headers or {})
    return RawResponse(status_code=status_code, headers=all_headers, body=text.encode("utf-8"))


@pytest.fixture
def fake_transport():
    """Factory building a FakeTransport from scripted responses."""
    return FakeTransport


@pytest.fixture
def make_json_response():
    return json_response


@pytest.fixture
def make_text_response():
    return text_response
