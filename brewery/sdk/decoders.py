"""Decode strategies for Brewery API responses.

Each function takes a raw :class:`httpx.Response` and turns its body into
one representation. The client sends a request once and picks a decoder,
so the same endpoint can be read as typed beers, JSON nodes, plain
mappings or text.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, List

import httpx
from pydantic import ValidationError

from .exceptions import InvalidResponseError
from .models import BeerDTO

Decoder = Callable[[httpx.Response], Iterable[Any]]


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise InvalidResponseError(f"Response from {response.request.url} is not valid JSON") from exc


def _validate(payload: Any) -> BeerDTO:
    try:
        return BeerDTO.model_validate(payload)
    except ValidationError as exc:
        raise InvalidResponseError(f"Response is not a valid beer: {exc}") from exc


def _elements(response: httpx.Response) -> List[Any]:
    payload = _json(response)
    # Paged endpoints wrap the items in a "content" array.
    if isinstance(payload, dict) and isinstance(payload.get("content"), list):
        return payload["content"]
    if isinstance(payload, list):
        return payload
    raise InvalidResponseError(
        f"Expected a JSON array from {response.request.url}, got {type(payload).__name__}"
    )


def beer(response: httpx.Response) -> BeerDTO:
    """Decode a single beer."""
    return _validate(_json(response))


def beers(response: httpx.Response) -> List[BeerDTO]:
    """Decode a collection into typed beers."""
    return [_validate(o) for o in _elements(response)]


def json_nodes(response: httpx.Response) -> List[Any]:
    """Decode a collection into untyped JSON values."""
    return _elements(response)


def maps(response: httpx.Response) -> List[dict]:
    """Decode a collection into key/value mappings."""
    items = _elements(response)
    for item in items:
        if not isinstance(item, dict):
            raise InvalidResponseError(f"Expected a JSON object, got {type(item).__name__}")
    return items


def text(response: httpx.Response) -> List[str]:
    """Return the body as text, untouched."""
    body = response.text
    return [body] if body else []
