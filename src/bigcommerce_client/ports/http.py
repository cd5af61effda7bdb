"""HTTP transport abstraction for the request executor.

Separates the wire transport from retry, decoding and error mapping.
Tests substitute a fake transport instead of patching aiohttp.
"""

from dataclasses import dataclass, field
from typing import Protocol


@dataclass
class RawResponse:
    """Undecoded HTTP response as produced by the transport."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    url: str = ""

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class IHttpTransport(Protocol):
    """Abstraction for the HTTP transport.

    Single Responsibility: Send one request and return the raw response.
    Does NOT handle:
    - Retries
    - Decompression or content decoding
    - Error mapping
    """

    async def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
    ) -> RawResponse:
        """Execute a single HTTP request.

        Args:
            method: Upper-case HTTP method
            url: Full URL
            headers: Request headers
            body: Serialized request body

        Returns:
            RawResponse with status, headers and undecoded body bytes

        Raises:
            aiohttp.ClientError, asyncio.TimeoutError, OSError: On transport failure
        """
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...
