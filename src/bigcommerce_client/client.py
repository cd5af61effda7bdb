"""
BigCommerce API client.

Store-level facade over RequestExecutor: builds authenticated executors for
the REST API and the OAuth login service, shapes resource paths, and exposes
the signed payload verifier.
"""

import re
from typing import Any, Mapping

from bigcommerce_client.config.state import BigCommerceConfig, build_config
from bigcommerce_client.config.value_objects import HttpClientConfig
from bigcommerce_client.exceptions import ConfigError
from bigcommerce_client.observability import get_client_logger
from bigcommerce_client.ports.http import IHttpTransport
from bigcommerce_client.request.executor import RequestExecutor
from bigcommerce_client.verifier import verify_signed_payload

TOKEN_PATH = "/oauth2/token"
AUTHORIZE_QUERY_KEYS = ("code", "scope", "context")

# Insert the response extension before any query string.
_EXTENSION_RE = re.compile(r"(\?|$)")


class BigCommerce:
    """Client for one BigCommerce store.

    Usage:
        >>> async with BigCommerce({"clientId": "...", "accessToken": "...",
        ...                         "storeHash": "abc123", "apiVersion": "v3"}) as bc:
        ...     products = await bc.get("/catalog/products")
    """

    def __init__(
        self,
        config: BigCommerceConfig | Mapping[str, Any] | None = None,
        *,
        transport: IHttpTransport | None = None,
        agent: Any = None,
    ):
        """Initialize the client.

        Args:
            config: BigCommerceConfig or a mapping accepted by it
            transport: Transport shared by every executor this client builds
            agent: Shared aiohttp connector for the default transport

        Raises:
            ConfigError: If config is missing or invalid
        """
        self.config = build_config(dict(config) if isinstance(config, Mapping) else config)
        self.api_version = self.config.api_version
        self.transport = transport
        self.agent = agent
        self._api: RequestExecutor | None = None
        self.log = get_client_logger(store_hash=self.config.store_hash)

    async def __aenter__(self) -> "BigCommerce":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the session executor; an injected transport is left to its owner."""
        if self._api is not None and self.transport is None:
            await self._api.close()
        self._api = None

    # ------------------------------------------------------------------
    # Handshake
    # ------------------------------------------------------------------

    def verify(self, signed_request: str | None) -> Any:
        """Verify a ``signed_payload`` from the load/uninstall callbacks."""
        return verify_signed_payload(signed_request, self.config.secret)

    async def authorize(self, query: Mapping[str, Any] | None) -> Any:
        """
        Exchange the OAuth ``code`` for a permanent access token.

        Args:
            query: Query parameters received on the auth callback

        Returns:
            The token response (access_token, scope, user, context)

        Raises:
            ConfigError: If the query parameters are missing
        """
        if not query or any(key not in query for key in AUTHORIZE_QUERY_KEYS):
            raise ConfigError(
                "The URL query parameters (code, scope, context) are required."
            )

        payload = {
            "client_id": self.config.client_id,
            "client_secret": self.config.secret,
            "redirect_uri": self.config.callback,
            "grant_type": "authorization_code",
            "code": query["code"],
            "scope": query["scope"],
            "context": query["context"],
        }

        login = self._executor(self.config.login_url, self.config.headers)
        self.log.info("authorize_started", context=query["context"])
        try:
            return await login.run("post", TOKEN_PATH, payload)
        finally:
            if self.transport is None:
                await login.close()

    # ------------------------------------------------------------------
    # API requests
    # ------------------------------------------------------------------

    def _executor(self, host: str, headers: Mapping[str, str]) -> RequestExecutor:
        return RequestExecutor(
            host,
            headers,
            agent=self.agent,
            fail_on_limit_reached=self.config.fail_on_limit_reached,
            max_retry_delay=self.config.max_retry_delay,
            transport=self.transport,
            http_config=HttpClientConfig(timeout=self.config.timeout),
        )

    def create_api_request(self) -> RequestExecutor:
        """Build an executor for the REST API with the auth headers set."""
        accept = "application/xml" if self.config.response_type == "xml" else "application/json"
        headers = {
            "Accept": accept,
            "X-Auth-Client": self.config.client_id or "",
            "X-Auth-Token": self.config.access_token or "",
        }
        headers.update(self.config.headers)
        return self._executor(self.config.api_url, headers)

    @property
    def api(self) -> RequestExecutor:
        """Executor reused by every call of this session."""
        if self._api is None:
            self._api = self.create_api_request()
        return self._api

    def build_path(self, path: str) -> str:
        """Prefix a resource path with the store and API version."""
        if not path.startswith("/"):
            path = f"/{path}"
        extension = ".xml" if self.config.response_type == "xml" else ""
        path = _EXTENSION_RE.sub(lambda m: extension + m.group(1), path, count=1)
        return f"/stores/{self.config.store_hash}/{self.api_version}{path}"

    async def request(self, method: str, path: str, body: Any = None) -> Any:
        """
        Call a store resource.

        Raises:
            ConfigError: If access token or store hash are missing
        """
        if not self.config.access_token or not self.config.store_hash:
            raise ConfigError(
                "The access token and store hash are required to call the BigCommerce API"
            )

        return await self.api.run(method, self.build_path(path), body)

    async def get(self, path: str) -> Any:
        return await self.request("get", path)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.request("post", path, body)

    async def put(self, path: str, body: Any = None) -> Any:
        return await self.request("put", path, body)

    async def delete(self, path: str) -> Any:
        return await self.request("delete", path)
