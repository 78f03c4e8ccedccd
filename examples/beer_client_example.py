"""Example walking through the Brewery SDK beer operations."""

import asyncio
import logging

from brewery.sdk import BeerClient, BeerDTO, BeerStyle, BreweryConfig, ResourceNotFoundError
from brewery.sdk.config import load_dotenv_for_sdk


async def main() -> None:
    """Create, change, list and delete a beer."""

    logging.basicConfig(level=logging.INFO)

    # Load OAUTH_* and WEBCLIENT_ROOTURL from a .env file if present
    load_dotenv_for_sdk()
    config = BreweryConfig.from_environment()

    print("=== Brewery SDK Example ===\n")

    async with BeerClient.from_config(config) as client:
        # 1. Create
        beer = await client.create_beer(
            BeerDTO(beer_name="Mango Bobs", beer_style=BeerStyle.IPA, upc="123456", price="12.99")
        )
        print(f"1. Created {beer.beer_name} with id {beer.id}")

        # 2. Partial update keeps the fields we do not send
        beer = await client.patch_beer(BeerDTO(id=beer.id, beer_name="Mango Bobs Reserve"))
        print(f"2. Patched name: {beer.beer_name}, upc still {beer.upc}")

        # 3. Listing
        print("3. IPAs on the server:")
        async for ipa in client.list_beers_by_style(BeerStyle.IPA):
            print(f"   - {ipa.beer_name} ({ipa.id})")

        # 4. Delete and confirm with the resilient lookup
        await client.delete_beer(beer)
        try:
            await client.find_beer_by_id(beer.id)
        except ResourceNotFoundError as e:
            print(f"4. Deleted: {e}")


if __name__ == "__main__":
    asyncio.run(main())
