"""OAuth2 client-credentials support for the Brewery SDK.

The transport asks an :class:`AuthorizedClientManager` for a bearer token
before every request. :class:`ClientCredentialsManager` is the stock
implementation: it exchanges client credentials at the registration's
token endpoint and caches the resulting token until shortly before it
expires.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol

import httpx
from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict

from .exceptions import TokenError

logger = logging.getLogger(__name__)


class ClientRegistration(BaseModel):
    """Client-credentials registration metadata."""

    model_config = ConfigDict(frozen=True)

    registration_id: str
    client_id: str
    client_secret: str
    token_uri: str
    scope: Optional[str] = None


@dataclass(frozen=True)
class AccessToken:
    """A bearer token and the epoch second it stops being usable."""

    value: str
    expires_at: Optional[float] = None

    def is_expired(self, now: float, clock_skew: float = 0.0) -> bool:
        if self.expires_at is None:
            return True
        return now >= self.expires_at - clock_skew


class AuthorizedClientManager(Protocol):
    """Anything able to hand out a current access token for a registration."""

    async def get_access_token(self, registration_id: str) -> str: ...

    def invalidate(self, registration_id: str) -> None: ...


class ClientCredentialsManager:
    """Fetch and cache client-credentials tokens per registration.

    Parameters
    ----------
    registrations : Iterable[ClientRegistration]
        Registrations this manager can authorize
    transport : httpx.AsyncBaseTransport, optional
        Transport used to reach the token endpoints (tests pass a mock)
    clock : Callable[[], float], optional
        Source of the current epoch time. Default is ``time.time``
    clock_skew : float, optional
        Seconds before expiry at which a cached token is refreshed.
        Default is 60

    Notes
    -----
    Token expiry is read from ``expires_in`` when the endpoint returns it,
    otherwise from the ``exp`` claim of a JWT access token. Tokens with
    neither are fetched again for every request.
    """

    def __init__(
        self,
        registrations: Iterable[ClientRegistration],
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
        clock_skew: float = 60.0,
    ):
        self._registrations = {r.registration_id: r for r in registrations}
        self._transport = transport
        self._clock = clock
        self.clock_skew = clock_skew
        self._tokens: dict[str, AccessToken] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    async def get_access_token(self, registration_id: str) -> str:
        """Return a valid access token, refreshing it when needed.

        Raises
        ------
        TokenError
            If the registration is unknown or the token endpoint fails
        """
        registration = self._registrations.get(registration_id)
        if registration is None:
            raise TokenError(registration_id, "unknown client registration")

        lock = self._locks.setdefault(registration_id, asyncio.Lock())
        async with lock:
            token = self._tokens.get(registration_id)
            if token is None or token.is_expired(self._clock(), self.clock_skew):
                token = await self._fetch_token(registration)
                if token.expires_at is not None:
                    self._tokens[registration_id] = token
                else:
                    self._tokens.pop(registration_id, None)
            return token.value

    def invalidate(self, registration_id: str) -> None:
        """Drop the cached token for a registration."""
        self._tokens.pop(registration_id, None)

    async def _fetch_token(self, registration: ClientRegistration) -> AccessToken:
        data = {"grant_type": "client_credentials"}
        if registration.scope:
            data["scope"] = registration.scope

        logger.debug(
            "Requesting access token for '%s' from %s",
            registration.registration_id,
            registration.token_uri,
        )
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(
                    registration.token_uri,
                    data=data,
                    auth=(registration.client_id, registration.client_secret),
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            raise TokenError(registration.registration_id, str(exc)) from exc

        if resp.is_error:
            raise TokenError(
                registration.registration_id,
                f"token endpoint returned HTTP {resp.status_code}",
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise TokenError(registration.registration_id, "token response is not JSON") from exc

        value = payload.get("access_token") if isinstance(payload, dict) else None
        if not value:
            raise TokenError(registration.registration_id, "token response has no access_token")

        return AccessToken(value=value, expires_at=self._expiry(value, payload.get("expires_in")))

    def _expiry(self, value: str, expires_in: object) -> Optional[float]:
        if expires_in is not None:
            try:
                return self._clock() + float(expires_in)
            except (TypeError, ValueError):
                logger.warning("Ignoring malformed expires_in value: %r", expires_in)

        try:
            claims = jwt.get_unverified_claims(value)
        except JWTError:
            return None
        exp = claims.get("exp")
        return float(exp) if isinstance(exp, (int, float)) else None
