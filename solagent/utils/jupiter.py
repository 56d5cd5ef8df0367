"""
Jupiter aggregator client.

Covers the quote endpoint, the swap endpoint that returns a ready-made
unsigned transaction, and the jupSOL staking blink. Quotes are treated as
opaque JSON documents: they are forwarded to ``/swap`` exactly as received.
"""

import base64
import binascii
import logging
from typing import Any, Dict, Optional

import httpx
from solders.transaction import VersionedTransaction

from solagent.config import JUPITER_API, JUPITER_STAKE_API
from solagent.errors import BuildError, QuoteError
from solagent.utils.token import NATIVE_MINT

logger = logging.getLogger(__name__)

JUPSOL_MINT = "jupSoLaHXQiZZTSfEWMTRRgpnyFm8f6sZdosWBjx93v"
# Caps the accounts a route may touch, which bounds transaction size and fees
MAX_ROUTE_ACCOUNTS = 20


def build_quote_params(
    input_mint: str, output_mint: str, amount: int, slippage_bps: int
) -> Dict[str, str]:
    """Query parameters for ``GET /quote``."""
    return {
        "inputMint": str(input_mint),
        "outputMint": str(output_mint),
        "amount": str(amount),
        "slippageBps": str(slippage_bps),
        "onlyDirectRoutes": "true",
        "maxAccounts": str(MAX_ROUTE_ACCOUNTS),
    }


def build_swap_request(quote: Dict[str, Any], user_public_key: str) -> Dict[str, Any]:
    """JSON body for ``POST /swap``; the quote is embedded unmodified."""
    return {
        "quoteResponse": quote,
        "userPublicKey": str(user_public_key),
        "wrapAndUnwrapSol": True,
        "dynamicComputeUnitLimit": True,
        "prioritizationFeeLamports": "auto",
        "feeAccount": None,
    }


def decode_transaction(encoded: Any) -> VersionedTransaction:
    """Decode a base64 versioned transaction, raising BuildError on bad input."""
    if not isinstance(encoded, str) or not encoded:
        raise BuildError("Aggregator response did not contain a transaction.")
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise BuildError(f"Transaction is not valid base64: {e}", cause=e) from e
    try:
        return VersionedTransaction.from_bytes(raw)
    except Exception as e:
        raise BuildError(f"Malformed transaction bytes: {e}", cause=e) from e


class JupiterClient:
    """Jupiter swap API client."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        stake_url: Optional[str] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize Jupiter client.

        Args:
            base_url: Swap API base URL (defaults to quote-api.jup.ag/v6)
            stake_url: Staking blink base URL (defaults to worker.jup.ag)
            timeout: Seconds allowed per HTTP request
        """
        self.base_url = (base_url or JUPITER_API).rstrip("/")
        self.stake_url = (stake_url or JUPITER_STAKE_API).rstrip("/")
        self.timeout = timeout

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int = 300,
    ) -> Dict[str, Any]:
        """
        Get a swap quote.

        Args:
            input_mint: Input token mint address
            output_mint: Output token mint address
            amount: Amount of input token in base units
            slippage_bps: Slippage tolerance in basis points

        Returns:
            The quote document, untouched

        Raises:
            QuoteError: If the request fails or the body is not a JSON object
        """
        params = build_quote_params(input_mint, output_mint, amount, slippage_bps)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.base_url}/quote", params=params)
        except httpx.HTTPError as e:
            raise QuoteError(f"Failed to fetch quote: {e}", cause=e) from e

        if response.status_code != 200:
            raise QuoteError(
                f"Failed to fetch quote: {response.status_code} - {response.text}"
            )
        try:
            quote = response.json()
        except ValueError as e:
            raise QuoteError(f"Quote response is not JSON: {e}", cause=e) from e
        if not isinstance(quote, dict):
            raise QuoteError("Quote response is not a JSON object.")
        return quote

    async def get_swap_transaction(
        self, quote: Dict[str, Any], user_public_key: str
    ) -> VersionedTransaction:
        """
        Exchange a quote for an unsigned swap transaction.

        Raises:
            BuildError: If the request fails or the transaction cannot be decoded
        """
        payload = build_swap_request(quote, user_public_key)
        data = await self._post_for_transaction(f"{self.base_url}/swap", payload, "swap")
        return decode_transaction(data.get("swapTransaction"))

    async def get_stake_transaction(
        self, amount_lamports: int, account: str
    ) -> VersionedTransaction:
        """
        Get an unsigned SOL -> jupSOL staking transaction.

        Raises:
            BuildError: If the request fails or the transaction cannot be decoded
        """
        url = f"{self.stake_url}/{NATIVE_MINT}/{JUPSOL_MINT}/{amount_lamports}"
        data = await self._post_for_transaction(url, {"account": str(account)}, "stake")
        return decode_transaction(data.get("transaction"))

    async def _post_for_transaction(
        self, url: str, payload: Dict[str, Any], what: str
    ) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise BuildError(f"Failed to fetch {what} transaction: {e}", cause=e) from e

        if response.status_code != 200:
            raise BuildError(
                f"Failed to fetch {what} transaction: {response.status_code} - {response.text}"
            )
        try:
            data = response.json()
        except ValueError as e:
            raise BuildError(f"{what} response is not JSON: {e}", cause=e) from e
        if not isinstance(data, dict):
            raise BuildError(f"{what} response is not a JSON object.")
        return data
