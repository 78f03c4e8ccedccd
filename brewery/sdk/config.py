"""Simplified configuration management for the Brewery SDK."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .auth import ClientRegistration

DEFAULT_REGISTRATION_ID = "springauth"


class BreweryConfig(BaseModel):
    """Unified configuration for the Brewery SDK."""

    model_config = ConfigDict(frozen=True)

    # API endpoint
    root_url: str = Field(default="http://localhost:8080")

    # OAuth2 client-credentials registration
    registration_id: str = Field(default=DEFAULT_REGISTRATION_ID)
    client_id: str = Field(default="")
    client_secret: str = Field(default="")
    token_uri: str = Field(default="http://localhost:9000/oauth2/token")
    scope: Optional[str] = Field(default="message.read message.write")

    # Resilient lookup settings
    lookup_timeout: float = Field(default=5.0, gt=0)
    lookup_retries: int = Field(default=3, ge=0)

    @classmethod
    def from_environment(cls) -> "BreweryConfig":
        """Create configuration from environment variables."""
        defaults = cls()
        return cls(
            root_url=_get_env_var(["WEBCLIENT_ROOTURL", "BREWERY_API"], defaults.root_url),
            registration_id=_get_env_var(["OAUTH_REGISTRATION_ID"], defaults.registration_id),
            client_id=_get_env_var(["OAUTH_CLIENT_ID"], defaults.client_id),
            client_secret=_get_env_var(["OAUTH_CLIENT_SECRET"], defaults.client_secret),
            token_uri=_get_env_var(["OAUTH_TOKEN_URI"], defaults.token_uri),
            scope=_get_env_var(["OAUTH_SCOPE"], defaults.scope or "") or None,
            lookup_timeout=float(_get_env_var(["BREWERY_LOOKUP_TIMEOUT"], str(defaults.lookup_timeout))),
            lookup_retries=int(_get_env_var(["BREWERY_LOOKUP_RETRIES"], str(defaults.lookup_retries))),
        )

    def registration(self) -> ClientRegistration:
        """Return the OAuth2 client registration described by this config."""
        return ClientRegistration(
            registration_id=self.registration_id,
            client_id=self.client_id,
            client_secret=self.client_secret,
            token_uri=self.token_uri,
            scope=self.scope,
        )


def _get_env_var(keys: list[str], default: str = "") -> str:
    """Get first available environment variable from a list of keys."""
    for key in keys:
        if value := os.getenv(key):
            return value
    return default


def load_dotenv_for_sdk(path: Optional[Path] = None, *, override: bool = False) -> None:
    """Load environment variables from .env file."""
    if path is None:
        mode = os.getenv("BREWERY_ENV", "local").lower()
        env_files = {
            "local": ".env.local",
            "development": ".env.development",
            "dev": ".env.development",
            "production": ".env.production",
            "prod": ".env.production",
        }
        path = Path.cwd() / env_files.get(mode, ".env.local")

        # If the environment-specific file doesn't exist, try the default .env file
        if not path.exists():
            default_env = Path.cwd() / ".env"
            if default_env.exists():
                path = default_env

    if path.exists():
        load_dotenv(path, override=override)
