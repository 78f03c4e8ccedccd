"""Thin async client for the Brewery catalog REST API."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Optional, Union
from urllib.parse import quote, unquote, urlsplit

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)
from tenacity.retry import retry_base
from tenacity.wait import wait_base

from . import decoders
from ._http import HTTPClient, TimeoutConfig
from .auth import AuthorizedClientManager, ClientCredentialsManager
from .config import BreweryConfig
from .exceptions import (
    BreweryError,
    ClientError,
    InvalidResponseError,
    RequestTimeoutError,
    ResourceNotFoundError,
    ServerError,
    TransportError,
    UnknownResponseError,
)
from .models import BeerDTO, BeerStyle

logger = logging.getLogger(__name__)

BEER_PATH = "/api/v3/beer"


@dataclass
class RetryPolicy:
    """How ``find_beer_by_id`` retries a failed exchange.

    The default retries every SDK failure immediately, three times.

    Attributes
    ----------
    retries : int
        Attempts made after the first one
    wait : tenacity.wait.wait_base
        Delay between attempts
    retry : tenacity.retry.retry_base
        Predicate deciding whether a failed attempt is retried
    """

    retries: int = 3
    wait: wait_base = field(default_factory=wait_none)
    retry: retry_base = field(default_factory=lambda: retry_if_exception_type(BreweryError))

    @classmethod
    def server_errors_only(cls, retries: int = 3, wait: wait_base | None = None) -> "RetryPolicy":
        """Retry only 5xx responses and transport failures."""
        return cls(
            retries=retries,
            wait=wait or wait_none(),
            retry=retry_if_exception_type((ServerError, TransportError)),
        )


def classify_lookup(response: httpx.Response, beer_id: str) -> BeerDTO:
    """Turn a lookup response into a beer or a classified exception."""
    status = response.status_code
    logger.debug("Response status: %s", status)
    logger.debug("Content-Type: %s", response.headers.get("content-type"))

    if response.is_success:
        beer = decoders.beer(response)
        logger.info("Successfully retrieved beer: %s", beer.beer_name)
        return beer
    if status == 404:
        raise ResourceNotFoundError(beer_id, response.text)
    if response.is_client_error:
        raise ClientError(status, response.text)
    if response.is_server_error:
        raise ServerError(status, response.text)
    raise UnknownResponseError(status, response.text)


class BeerClient:
    """Async client for the beer resource of the Brewery API.

    This client provides methods to:
    - Create, replace, patch and delete beers
    - List beers, optionally filtered by style or as untyped data
    - Look a beer up by id, plainly or with retries and a timeout

    Mutating operations always return the beer as re-fetched from the
    server, never the object that was sent.

    Parameters
    ----------
    http : HTTPClient
        Configured transport, shared by all operations
    lookup_timeout : float, optional
        Seconds allowed for the whole ``find_beer_by_id`` sequence.
        Default is 5.0
    retry_policy : RetryPolicy, optional
        Retry behaviour of ``find_beer_by_id``
    """

    def __init__(
        self,
        http: HTTPClient,
        *,
        lookup_timeout: float = 5.0,
        retry_policy: RetryPolicy | None = None,
    ):
        self._http = http
        self.lookup_timeout = lookup_timeout
        self.retry_policy = retry_policy or RetryPolicy()

    @classmethod
    def from_config(
        cls,
        config: BreweryConfig,
        manager: AuthorizedClientManager | None = None,
        *,
        timeout_config: TimeoutConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> "BeerClient":
        """Build a client from configuration.

        When no manager is given, a :class:`ClientCredentialsManager` for
        the configured registration is created.
        """
        manager = manager or ClientCredentialsManager([config.registration()])
        http = HTTPClient(
            config.root_url,
            manager,
            registration_id=config.registration_id,
            timeout_config=timeout_config,
            transport=transport,
        )
        return cls(
            http,
            lookup_timeout=config.lookup_timeout,
            retry_policy=retry_policy or RetryPolicy(retries=config.lookup_retries),
        )

    # ---------------- Mutations -----------------

    async def create_beer(self, beer: BeerDTO) -> BeerDTO:
        """Create a beer and return it as stored by the server.

        Raises
        ------
        HTTPError
            If the API rejects the request
        InvalidResponseError
            If the response carries no Location header
        """
        resp = await self._http.request("POST", BEER_PATH, json=beer.to_payload(partial=True))
        location = resp.headers.get("Location")
        if not location:
            raise InvalidResponseError("Create response has no Location header")
        new_id = unquote(urlsplit(location).path.rstrip("/").rsplit("/", 1)[-1])
        return await self.get_beer_by_id(new_id)

    async def update_beer(self, beer: BeerDTO) -> BeerDTO:
        """Replace a beer entirely and return the stored result."""
        beer_id = _require_id(beer)
        await self._http.request("PUT", _beer_url(beer_id), json=beer.to_payload())
        return await self.get_beer_by_id(beer_id)

    async def patch_beer(self, beer: BeerDTO) -> BeerDTO:
        """Update the fields of a beer that hold a value and return the stored result."""
        beer_id = _require_id(beer)
        await self._http.request("PATCH", _beer_url(beer_id), json=beer.to_payload(partial=True))
        return await self.get_beer_by_id(beer_id)

    async def delete_beer(self, beer: BeerDTO) -> None:
        """Delete a beer."""
        await self._http.request("DELETE", _beer_url(_require_id(beer)))

    # ---------------- Listing -----------------

    def list_beers(self) -> AsyncIterator[BeerDTO]:
        """Iterate over all beers in server order."""
        return self._stream(decoders.beers)

    def list_beers_by_style(self, beer_style: Union[str, BeerStyle]) -> AsyncIterator[BeerDTO]:
        """Iterate over the beers of one style, filtered by the server."""
        style = beer_style.value if isinstance(beer_style, BeerStyle) else beer_style
        return self._stream(decoders.beers, params={"beerStyle": style})

    def list_beers_json(self) -> AsyncIterator[Any]:
        """Iterate over all beers as untyped JSON values."""
        return self._stream(decoders.json_nodes)

    def list_beers_map(self) -> AsyncIterator[dict]:
        """Iterate over all beers as plain dictionaries."""
        return self._stream(decoders.maps)

    def list_beers_text(self) -> AsyncIterator[str]:
        """Yield the raw text of the listing response."""
        return self._stream(decoders.text)

    async def _stream(
        self, decoder: decoders.Decoder, params: Optional[dict[str, str]] = None
    ) -> AsyncIterator[Any]:
        resp = await self._http.request("GET", BEER_PATH, params=params)
        for item in decoder(resp):
            yield item

    # ---------------- Lookup -----------------

    async def get_beer_by_id(self, beer_id: str) -> BeerDTO:
        """Fetch a beer by id.

        Raises
        ------
        HTTPError
            For any non-2xx response, including 404
        """
        resp = await self._http.request("GET", _beer_url(beer_id))
        return decoders.beer(resp)

    async def find_beer_by_id(self, beer_id: str) -> BeerDTO:
        """Fetch a beer by id with response classification, retries and a timeout.

        Parameters
        ----------
        beer_id : str
            Identifier of the beer

        Returns
        -------
        BeerDTO
            The beer as stored by the server

        Raises
        ------
        ResourceNotFoundError
            If the server answered 404 on the last attempt
        ClientError
            For any other 4xx on the last attempt
        ServerError
            For a 5xx on the last attempt
        UnknownResponseError
            For a status outside the classes above
        RequestTimeoutError
            If all attempts together exceed ``lookup_timeout``
        """
        try:
            return await asyncio.wait_for(self._find_with_retry(beer_id), timeout=self.lookup_timeout)
        except asyncio.TimeoutError as exc:
            error = RequestTimeoutError(beer_id, self.lookup_timeout)
            logger.error("Error retrieving beer %s: %s", beer_id, error)
            raise error from exc
        except BreweryError as exc:
            logger.error("Error retrieving beer %s: %s", beer_id, exc)
            raise

    async def _find_with_retry(self, beer_id: str) -> BeerDTO:
        policy = self.retry_policy
        retrying = AsyncRetrying(
            stop=stop_after_attempt(policy.retries + 1),
            wait=policy.wait,
            retry=policy.retry,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                resp = await self._http.send("GET", _beer_url(beer_id))
                beer = classify_lookup(resp, beer_id)
        return beer

    # ---------------- internal -----------------

    async def aclose(self) -> None:
        """Close the underlying HTTP client.

        Should be called when done with the client to properly clean up
        connections. Can also be used as an async context manager to
        handle this automatically.
        """
        await self._http.aclose()

    async def __aenter__(self) -> "BeerClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def _beer_url(beer_id: str) -> str:
    return f"{BEER_PATH}/{quote(beer_id, safe='')}"


def _require_id(beer: BeerDTO) -> str:
    if not beer.id:
        raise ValueError("Beer has no id; create it first")
    return beer.id
