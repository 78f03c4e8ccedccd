"""Internal HTTP client wrapper for the Brewery SDK.

This module builds the pre-configured httpx client every SDK operation
goes through: bearer-token authentication, exchange logging and the API
base URL are attached once here.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, AsyncGenerator

import httpx

from .auth import AuthorizedClientManager
from .exceptions import ConnectionError, HTTPError, TransportError

logger = logging.getLogger(__name__)

_STARTED = "brewery.started"
REJECTED_STATUS_CODES = {401, 403}


@dataclass
class TimeoutConfig:
    """Configuration for HTTP request timeouts."""

    read: float = 30.0
    connect: float = 10.0
    write: float = 30.0
    pool: float = 30.0


class BearerTokenAuth(httpx.Auth):
    """Attach a bearer token from the manager to each outgoing request.

    A 401 or 403 answer drops the cached token so the next request
    obtains a fresh one.
    """

    def __init__(self, manager: AuthorizedClientManager, registration_id: str):
        self.manager = manager
        self.registration_id = registration_id

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token = await self.manager.get_access_token(self.registration_id)
        request.headers["Authorization"] = f"Bearer {token}"
        response = yield request
        if response.status_code in REJECTED_STATUS_CODES:
            logger.warning(
                "Token for '%s' rejected with HTTP %s, discarding it",
                self.registration_id,
                response.status_code,
            )
            self.manager.invalidate(self.registration_id)


async def _log_request(request: httpx.Request) -> None:
    request.extensions[_STARTED] = time.perf_counter()
    logger.debug("Request: %s %s", request.method, request.url)


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    started = request.extensions.get(_STARTED)
    duration_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
    logger.info(
        "Response: %s %s -> %s (%.1f ms)",
        request.method,
        request.url,
        response.status_code,
        duration_ms,
    )


def configure_client(
    base_url: str,
    manager: AuthorizedClientManager,
    *,
    registration_id: str = "springauth",
    timeout_config: TimeoutConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build the async client used for all API calls.

    Parameters
    ----------
    base_url : str
        Root URL of the Brewery API; request paths are resolved against it
    manager : AuthorizedClientManager
        Source of bearer tokens
    registration_id : str, optional
        Client registration to request tokens for. Default is "springauth"
    timeout_config : TimeoutConfig, optional
        Per-phase transport timeouts
    transport : httpx.AsyncBaseTransport, optional
        Transport override, mainly for tests

    Returns
    -------
    httpx.AsyncClient
        Client with the auth filter, logging hooks and base URL attached
    """
    timeout_config = timeout_config or TimeoutConfig()
    timeout = httpx.Timeout(
        read=timeout_config.read,
        connect=timeout_config.connect,
        write=timeout_config.write,
        pool=timeout_config.pool,
    )
    return httpx.AsyncClient(
        auth=BearerTokenAuth(manager, registration_id),
        event_hooks={"request": [_log_request], "response": [_log_response]},
        base_url=base_url.rstrip("/"),
        timeout=timeout,
        transport=transport,
    )


class HTTPClient:
    """Async HTTP client with connection pooling and error handling."""

    def __init__(
        self,
        base_url: str,
        manager: AuthorizedClientManager,
        *,
        registration_id: str = "springauth",
        timeout_config: TimeoutConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client: httpx.AsyncClient | None = None
        self.base_url = base_url
        self.manager = manager
        self.registration_id = registration_id
        self.timeout_config = timeout_config or TimeoutConfig()
        self._transport = transport

    async def send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and return the response whatever its status."""
        if self._client is None:
            self._client = configure_client(
                self.base_url,
                self.manager,
                registration_id=self.registration_id,
                timeout_config=self.timeout_config,
                transport=self._transport,
            )

        try:
            return await self._client.request(method, url, **kwargs)
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ConnectionError(url, exc) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"HTTP request failed ({method} {url}): {exc}") from exc

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and raise :class:`HTTPError` unless it succeeded."""
        resp = await self.send(method, url, **kwargs)
        if not resp.is_success:
            raise HTTPError(resp.status_code, resp.text)
        return resp

    async def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def aclose(self) -> None:
        """Alias for close() to match expected interface."""
        await self.close()
