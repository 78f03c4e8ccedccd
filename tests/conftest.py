"""Pytest configuration and fixtures."""

import json
import uuid

import httpx
import pytest

from brewery.sdk._http import HTTPClient
from brewery.sdk.client import BEER_PATH, BeerClient

BEER_FIELDS = ("beerName", "beerStyle", "upc", "quantityOnHand", "price")


class StaticTokenManager:
    """Authorized-client manager handing out a fixed token."""

    def __init__(self, token: str = "test-token"):
        self.token = token
        self.calls = []
        self.invalidated = []

    async def get_access_token(self, registration_id: str) -> str:
        self.calls.append(registration_id)
        return self.token

    def invalidate(self, registration_id: str) -> None:
        self.invalidated.append(registration_id)


class FakeBeerServer:
    """In-memory stand-in for the beer API, usable as a MockTransport handler."""

    def __init__(self):
        self.beers = {}
        self.requests = []

    def add(self, **fields) -> dict:
        beer_id = str(uuid.uuid4())
        beer = {"id": beer_id, "version": 0}
        beer.update({name: fields.get(name) for name in BEER_FIELDS})
        self.beers[beer_id] = beer
        return beer

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == BEER_PATH:
            if request.method == "GET":
                style = request.url.params.get("beerStyle")
                items = [
                    b for b in self.beers.values() if style is None or b["beerStyle"] == style
                ]
                return httpx.Response(200, json=items)
            if request.method == "POST":
                beer = self.add(**json.loads(request.content))
                return httpx.Response(201, headers={"Location": f"{BEER_PATH}/{beer['id']}"})

        if path.startswith(BEER_PATH + "/"):
            beer = self.beers.get(path.rsplit("/", 1)[-1])
            if beer is None:
                return httpx.Response(404)
            if request.method == "GET":
                return httpx.Response(200, json=beer)
            if request.method == "PUT":
                body = json.loads(request.content)
                beer.update({name: body.get(name) for name in BEER_FIELDS})
                beer["version"] += 1
                return httpx.Response(204)
            if request.method == "PATCH":
                body = json.loads(request.content)
                beer.update({k: v for k, v in body.items() if k in BEER_FIELDS and v is not None})
                beer["version"] += 1
                return httpx.Response(204)
            if request.method == "DELETE":
                del self.beers[beer["id"]]
                return httpx.Response(204)

        return httpx.Response(405)


@pytest.fixture
def token_manager():
    """Manager returning a fixed bearer token."""
    return StaticTokenManager()


@pytest.fixture
def beer_server():
    """Empty fake beer API."""
    return FakeBeerServer()


@pytest.fixture
def make_client(token_manager):
    """Build a BeerClient talking to the given MockTransport handler."""

    def _make(handler, **kwargs) -> BeerClient:
        http = HTTPClient(
            "https://brewery.test",
            token_manager,
            transport=httpx.MockTransport(handler),
        )
        return BeerClient(http, **kwargs)

    return _make


@pytest.fixture
def beer_client(make_client, beer_server):
    """BeerClient wired to the fake beer API."""
    return make_client(beer_server)
