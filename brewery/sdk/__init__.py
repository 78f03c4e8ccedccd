"""Async SDK for the Brewery catalog API."""

from ._http import HTTPClient, TimeoutConfig, configure_client
from .auth import AuthorizedClientManager, ClientCredentialsManager, ClientRegistration
from .client import BeerClient, RetryPolicy
from .config import BreweryConfig, load_dotenv_for_sdk
from .exceptions import (
    BreweryError,
    ClientError,
    ConnectionError,
    HTTPError,
    InvalidResponseError,
    RequestTimeoutError,
    ResourceNotFoundError,
    ServerError,
    TokenError,
    TransportError,
    UnknownResponseError,
)
from .models import BeerDTO, BeerStyle

__all__ = [
    "AuthorizedClientManager",
    "BeerClient",
    "BeerDTO",
    "BeerStyle",
    "BreweryConfig",
    "BreweryError",
    "ClientCredentialsManager",
    "ClientError",
    "ClientRegistration",
    "ConnectionError",
    "HTTPClient",
    "HTTPError",
    "InvalidResponseError",
    "RequestTimeoutError",
    "ResourceNotFoundError",
    "RetryPolicy",
    "ServerError",
    "TimeoutConfig",
    "TokenError",
    "TransportError",
    "UnknownResponseError",
    "configure_client",
    "load_dotenv_for_sdk",
]
