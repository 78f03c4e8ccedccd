"""Data models for the Brewery catalog API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class BeerStyle(str, Enum):
    """Styles known to the catalog. Filters accept any string."""

    LAGER = "LAGER"
    PILSNER = "PILSNER"
    STOUT = "STOUT"
    GOSE = "GOSE"
    PORTER = "PORTER"
    ALE = "ALE"
    WHEAT = "WHEAT"
    IPA = "IPA"
    PALE_ALE = "PALE_ALE"
    SAISON = "SAISON"


class BeerDTO(BaseModel):
    """One catalog entry as exchanged with the API.

    Field names are snake_case in Python and camelCase on the wire.
    ``id`` is assigned by the server on create and never changes.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: Optional[str] = None
    version: Optional[int] = None
    beer_name: Optional[str] = None
    beer_style: Optional[str] = None
    upc: Optional[str] = None
    quantity_on_hand: Optional[int] = None
    price: Optional[Decimal] = None
    created_date: Optional[datetime] = Field(default=None)
    last_modified_date: Optional[datetime] = Field(default=None)

    @field_validator("beer_style", mode="before")
    @classmethod
    def style_as_value(cls, value: Any) -> Any:
        return value.value if isinstance(value, BeerStyle) else value

    def to_payload(self, *, partial: bool = False) -> dict[str, Any]:
        """Serialize for a request body.

        A full payload keeps ``null`` fields so a replace clears them on the
        server; a partial payload only carries fields that hold a value.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=partial)
