"""Test the beer model and its wire format."""

from decimal import Decimal

from brewery.sdk.models import BeerDTO, BeerStyle


def test_wire_names_are_camel_case():
    beer = BeerDTO.model_validate({"beerName": "Crank", "quantityOnHand": 12, "price": "9.50"})

    assert beer.beer_name == "Crank"
    assert beer.quantity_on_hand == 12
    assert beer.price == Decimal("9.50")


def test_style_enum_stored_as_plain_string():
    beer = BeerDTO(beer_style=BeerStyle.IPA)

    assert type(beer.beer_style) is str
    assert beer.to_payload(partial=True) == {"beerStyle": "IPA"}


def test_full_payload_keeps_nulls():
    payload = BeerDTO(id="1", beer_name="Crank").to_payload()

    assert payload["id"] == "1"
    assert payload["beerName"] == "Crank"
    assert payload["upc"] is None
    assert "quantityOnHand" in payload
