"""
Token price lookups through the Jupiter Price API and Pyth Hermes.

Prices are read-through only; nothing is cached between calls.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

import httpx

from solagent.config import JUPITER_PRICE_API, PYTH_HERMES_API
from solagent.errors import PriceError

logger = logging.getLogger(__name__)


class PriceClient:
    """Jupiter and Pyth price API client."""

    def __init__(
        self,
        price_url: Optional[str] = None,
        pyth_url: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.price_url = (price_url or JUPITER_PRICE_API).rstrip("/")
        self.pyth_url = (pyth_url or PYTH_HERMES_API).rstrip("/")
        self.timeout = timeout

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            raise PriceError(f"Price request failed: {e}", cause=e) from e

        if response.status_code != 200:
            raise PriceError(
                f"Price request failed: {response.status_code} - {response.text}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise PriceError(f"Price response is not JSON: {e}", cause=e) from e

    async def fetch_price(self, token_id: str) -> str:
        """
        Get the USD price of a token from Jupiter.

        Args:
            token_id: Token mint address

        Returns:
            The price as the decimal string Jupiter reports
        """
        data = await self._get_json(self.price_url, {"ids": token_id})
        entry = (data.get("data") or {}).get(token_id) if isinstance(data, dict) else None
        if not entry or entry.get("price") is None:
            raise PriceError(f"No price data for {token_id}.")
        return str(entry["price"])

    async def fetch_pyth_price_feed_id(self, token_symbol: str) -> str:
        """
        Find the Pyth USD price feed id for a token symbol.

        Args:
            token_symbol: Ticker such as "SOL" or "JUP"

        Returns:
            The hex feed id
        """
        symbol = token_symbol.upper()
        feeds = await self._get_json(
            f"{self.pyth_url}/v2/price_feeds",
            {"query": token_symbol, "asset_type": "crypto"},
        )
        if not isinstance(feeds, list) or not feeds:
            raise PriceError(f"No Pyth price feed found for {token_symbol}.")

        for feed in feeds:
            attributes = feed.get("attributes", {})
            if (
                attributes.get("base", "").upper() == symbol
                and attributes.get("quote_currency", "").upper() == "USD"
            ):
                return feed["id"]
        logger.debug(f"No exact USD feed for {symbol}, using first match")
        return feeds[0]["id"]

    async def fetch_price_by_pyth(self, price_feed_id: str) -> float:
        """
        Get the latest price published on a Pyth feed.

        Args:
            price_feed_id: Hex feed id from fetch_pyth_price_feed_id

        Returns:
            ``price * 10**expo`` as a float
        """
        data = await self._get_json(
            f"{self.pyth_url}/v2/updates/price/latest",
            {"ids[]": price_feed_id},
        )
        parsed = data.get("parsed") if isinstance(data, dict) else None
        if not parsed:
            raise PriceError(f"No Pyth price for feed {price_feed_id}.")
        try:
            price = parsed[0]["price"]
            return float(Decimal(str(price["price"])).scaleb(int(price["expo"])))
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise PriceError(f"Unexpected Pyth price payload: {e}", cause=e) from e
