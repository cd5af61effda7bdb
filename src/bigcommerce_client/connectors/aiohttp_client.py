"""Concrete HTTP transport for async requests.

Wraps aiohttp behind the IHttpTransport abstraction.
"""

import aiohttp

from bigcommerce_client.config.value_objects import HttpClientConfig
from bigcommerce_client.ports.http import IHttpTransport, RawResponse


class AiohttpTransport(IHttpTransport):
    """HTTP transport implementation using aiohttp.

    Responses are returned undecoded: automatic decompression is disabled so
    the decoder sees the original Content-Encoding and bytes.
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        connector: aiohttp.BaseConnector | None = None,
    ):
        """Initialize HTTP transport.

        Args:
            config: HTTP client configuration
            connector: Shared connection pool; never closed by this transport
        """
        self.config = config or HttpClientConfig()
        self.connector = connector
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(
                total=self.config.timeout, connect=self.config.connect_timeout
            )
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                connector=self.connector,
                connector_owner=self.connector is None,
                auto_decompress=False,
            )
        return self._session

    async def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
    ) -> RawResponse:
        """Execute one request.

        Args:
            method: Upper-case HTTP method
            url: Full URL
            headers: Request headers
            body: Serialized request body

        Returns:
            RawResponse with status, headers and raw body bytes

        Raises:
            aiohttp.ClientError: On connection errors
            asyncio.TimeoutError: When the configured timeout elapses
        """
        session = await self._get_session()

        async with session.request(
            method,
            url,
            data=body,
            headers=headers,
            allow_redirects=False,
            ssl=self.config.verify_ssl,
        ) as resp:
            payload = await resp.read()
            return RawResponse(
                status_code=resp.status,
                headers=dict(resp.headers),
                body=payload,
                url=str(resp.url),
            )

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
