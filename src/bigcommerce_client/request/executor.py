import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Mapping

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy

from bigcommerce_client import __version__
from bigcommerce_client.config.value_objects import HttpClientConfig, RetryConfig
from bigcommerce_client.connectors.aiohttp_client import AiohttpTransport
from bigcommerce_client.exceptions import ConfigError, NetworkError
from bigcommerce_client.observability import get_transport_logger
from bigcommerce_client.ports.http import IHttpTransport, RawResponse
from bigcommerce_client.request.decoder import JsonBody, classify_response, decode_body
from bigcommerce_client.request.error_mapper import ResponseErrorMapper
from bigcommerce_client.request.retry_handler import Attempt, RetryDecision, RetryHandler

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Accept-Encoding": "gzip, deflate",
    "Content-Type": "application/json",
    "User-Agent": f"bigcommerce-client-python/{__version__}",
}

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)


@dataclass(frozen=True)
class Destination:
    """Where every call of one executor goes. Never mutated after creation."""

    host: str
    base_path: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    protocol: str = "https"

    def __post_init__(self):
        object.__setattr__(self, "headers", CIMultiDictProxy(CIMultiDict(self.headers)))

    def url_for(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.protocol}://{self.host}{self.base_path}{path}"


@dataclass
class PendingCall:
    """Per-invocation state of run()."""

    method: str
    path: str
    body: Any = None
    attempt: Attempt = Attempt.FIRST


class RequestExecutor:
    """Async executor for calls against a single BigCommerce host.

    Single Responsibility: Issue a call, retry once on rate limiting, decode
    the body and raise a typed error for every non-success outcome.

    Dependencies injected (not instantiated when supplied):
    - transport: Executes HTTP requests (defaults to AiohttpTransport)
    - retry_handler: Decides rate-limit retry eligibility and delay
    """

    def __init__(
        self,
        host: str,
        headers: Mapping[str, str] | None = None,
        *,
        agent: aiohttp.BaseConnector | None = None,
        fail_on_limit_reached: bool = False,
        max_retry_delay: float = RetryConfig.max_retry_delay,
        base_path: str = "",
        protocol: str = "https",
        transport: IHttpTransport | None = None,
        http_config: HttpClientConfig | None = None,
    ):
        """Initialize the executor.

        Args:
            host: Hostname, e.g. api.bigcommerce.com
            headers: Merged into the default headers of every call
            agent: Shared aiohttp connector (connection-reuse policy)
            fail_on_limit_reached: Raise RateLimitError on 429 instead of retrying
            max_retry_delay: Ceiling in seconds for the retry-after wait
            base_path: Prefix for every request path
            protocol: URL scheme
            transport: Injected transport; AiohttpTransport when omitted
            http_config: Timeouts for the default transport

        Raises:
            ConfigError: If host is empty or not a string
        """
        if not host or not isinstance(host, str):
            raise ConfigError("The hostname is required to make the call to the server.")

        # Header names are case-insensitive; a caller override replaces the default
        merged = CIMultiDict(DEFAULT_HEADERS)
        for name, value in (headers or {}).items():
            merged[name] = value
        self.destination = Destination(
            host=host, base_path=base_path, headers=merged, protocol=protocol
        )
        self.agent = agent
        self.transport = transport or AiohttpTransport(http_config, connector=agent)
        self.retry_handler = RetryHandler(
            RetryConfig(
                fail_on_limit_reached=fail_on_limit_reached,
                max_retry_delay=max_retry_delay,
            )
        )
        self.log = get_transport_logger("request-executor", host=host)

    @property
    def hostname(self) -> str:
        return self.destination.host

    @property
    def headers(self) -> Mapping[str, str]:
        return self.destination.headers

    @property
    def fail_on_limit_reached(self) -> bool:
        return self.retry_handler.config.fail_on_limit_reached

    async def __aenter__(self) -> "RequestExecutor":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the transport."""
        await self.transport.close()

    @staticmethod
    def _serialize(body: Any) -> bytes | None:
        if body is None:
            return None
        return json.dumps(body).encode("utf-8")

    async def _send(self, call: PendingCall, payload: bytes | None) -> RawResponse:
        url = self.destination.url_for(call.path)
        try:
            return await self.transport.send(
                call.method, url, dict(self.destination.headers), payload
            )
        except TRANSPORT_ERRORS as e:
            message = str(e) or type(e).__name__
            self.log.error(
                "network_error", method=call.method, path=call.path, error=message
            )
            raise NetworkError(message) from e

    async def run(self, method: str, path: str, body: Any = None) -> Any:
        """Execute a call with one rate-limit retry.

        Args:
            method: HTTP method, case-insensitive
            path: Path relative to the destination base path
            body: JSON-serializable request body

        Returns:
            Parsed JSON value, or the raw text for non-JSON responses

        Raises:
            NetworkError: Transport failure
            RateLimitError: 429 while fail_on_limit_reached is set
            ApiError: Non-2xx status or an error declared in the JSON body
            DecodeError: Body could not be decompressed or parsed
        """
        call = PendingCall(method=method.upper(), path=path, body=body)
        payload = self._serialize(body)

        self.log.debug("request_started", method=call.method, path=call.path)

        while True:
            response = await self._send(call, payload)
            decision = self.retry_handler.decide(response, call.attempt)
            retry_after = self.retry_handler.parse_retry_after(response)

            if decision is RetryDecision.FAIL_FAST:
                self.log.warning(
                    "rate_limit_reached", path=call.path, retry_after=retry_after
                )
                raise ResponseErrorMapper.rate_limited(retry_after)

            if decision is RetryDecision.RETRY:
                delay = self.retry_handler.get_retry_delay(retry_after)
                self.log.warning(
                    "rate_limited_retrying",
                    path=call.path,
                    retry_after=retry_after,
                    delay=delay,
                )
                await asyncio.sleep(delay)
                call.attempt = Attempt.RETRY
                continue

            return self._resolve(call, response, retry_after)

    def _resolve(
        self, call: PendingCall, response: RawResponse, retry_after: float | None
    ) -> Any:
        plan = classify_response(
            response.status_code,
            response.header("Content-Type"),
            response.header("Content-Encoding"),
        )
        decoded = decode_body(plan, response.body)

        error = ResponseErrorMapper.map_response(
            response.status_code,
            decoded,
            retry_after=retry_after if response.status_code == 429 else None,
        )
        if error is not None:
            self.log.error(
                "request_failed",
                method=call.method,
                path=call.path,
                status_code=response.status_code,
                error_kind=error.kind.value,
                error=error.message,
            )
            raise error

        self.log.debug(
            "request_completed",
            method=call.method,
            path=call.path,
            status_code=response.status_code,
            attempts=int(call.attempt) + 1,
        )
        if isinstance(decoded, JsonBody):
            return decoded.value
        return decoded.text
