"""Exception classes for the Brewery SDK.

This module defines custom exceptions that can be raised by SDK operations,
providing more specific error handling than generic exceptions.
"""

from __future__ import annotations


class BreweryError(Exception):
    """Base exception for all Brewery SDK errors.

    All custom exceptions in the SDK inherit from this base class,
    allowing applications to catch all SDK-specific errors with a
    single except clause if desired.
    """

    pass


class HTTPError(BreweryError):
    """Raised when an HTTP request returns an error status code.

    This is the generic failure surfaced by every operation except
    ``find_beer_by_id``, which raises one of the subclasses below.

    Attributes
    ----------
    status_code : int
        The HTTP status code (e.g., 400, 401, 404, 500)
    body : str
        The response body, typically containing error details
    """

    def __init__(self, status_code: int, body: str, message: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"HTTP {status_code}: {body}")


class ClientError(HTTPError):
    """Raised by ``find_beer_by_id`` for a 4xx response."""

    def __init__(self, status_code: int, body: str = "", message: str | None = None):
        super().__init__(status_code, body, message or f"Client error: {status_code}")


class ResourceNotFoundError(ClientError):
    """Raised by ``find_beer_by_id`` when the beer does not exist.

    Attributes
    ----------
    beer_id : str
        The identifier that was looked up
    """

    def __init__(self, beer_id: str, body: str = ""):
        self.beer_id = beer_id
        super().__init__(404, body, f"Beer not found with ID: {beer_id}")


class ServerError(HTTPError):
    """Raised by ``find_beer_by_id`` for a 5xx response."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(status_code, body, f"Server error: {status_code}")


class UnknownResponseError(HTTPError):
    """Raised by ``find_beer_by_id`` for a status it cannot classify."""

    pass


class TransportError(BreweryError):
    """Raised when a request could not be exchanged with the API at all."""

    pass


class ConnectionError(TransportError):
    """Raised when unable to connect to the Brewery API.

    This typically indicates network issues, incorrect API URL,
    or the API service being unavailable.

    Attributes
    ----------
    url : str
        The URL that failed to connect
    original_error : Exception
        The underlying exception that caused the connection failure
    """

    def __init__(self, url: str, original_error: Exception):
        self.url = url
        self.original_error = original_error
        super().__init__(f"Failed to connect to {url}: {original_error}")


class TokenError(TransportError):
    """Raised when an access token cannot be obtained for a registration."""

    def __init__(self, registration_id: str, reason: str):
        self.registration_id = registration_id
        self.reason = reason
        super().__init__(f"Unable to obtain access token for '{registration_id}': {reason}")


class RequestTimeoutError(BreweryError):
    """Raised when ``find_beer_by_id`` does not finish within its timeout.

    Attributes
    ----------
    beer_id : str
        The identifier that was looked up
    timeout : float
        The time budget in seconds that was exceeded
    """

    def __init__(self, beer_id: str, timeout: float):
        self.beer_id = beer_id
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout}s retrieving beer {beer_id}")


class InvalidResponseError(BreweryError):
    """Raised when a successful response lacks something the SDK needs."""

    pass
