"""
Token helpers: program detection, mint decimals and amount scaling.

Amounts are scaled with ``Decimal`` and truncated toward zero, so
``1.5`` tokens with 6 decimals is always ``1500000`` base units and never
off by one from float rounding.
"""

import logging
from decimal import Decimal, ROUND_DOWN, InvalidOperation
from typing import Union

from solana.rpc.async_api import AsyncClient
from solders.pubkey import Pubkey
from spl.token.async_client import AsyncToken

from solagent.errors import MintLookupError

logger = logging.getLogger(__name__)

NATIVE_MINT = "So11111111111111111111111111111111111111112"
NATIVE_DECIMALS = 9
SPL_TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"


def is_native_mint(mint: Union[str, Pubkey, None]) -> bool:
    return mint is None or str(mint) == NATIVE_MINT


def human_to_smallest_units(human_amount: Union[str, int, float, Decimal], decimals: int) -> int:
    """
    Convert a human-readable token amount to integer base units.

    Examples:
        - human_to_smallest_units(0.07, 9) -> 70000000 (SOL)
        - human_to_smallest_units(1.5, 6) -> 1500000 (USDC)
        - human_to_smallest_units("0.0000001", 6) -> 0 (truncated)
    """
    try:
        amount = Decimal(str(human_amount))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid amount '{human_amount}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Invalid amount '{human_amount}'")
    if amount < 0:
        raise ValueError(f"Amount must not be negative, got {human_amount}")

    smallest_units = (amount * (Decimal(10) ** decimals)).to_integral_value(
        rounding=ROUND_DOWN
    )
    return int(smallest_units)


def smallest_units_to_human(smallest_units: int, decimals: int) -> float:
    return float(Decimal(smallest_units) / (Decimal(10) ** decimals))


async def get_token_program(client: AsyncClient, mint: Pubkey) -> Pubkey:
    """Return the token program (SPL Token or Token-2022) that owns ``mint``."""
    try:
        resp = await client.get_account_info(mint)
    except Exception as e:
        raise MintLookupError(f"Failed to fetch mint account {mint}: {e}", cause=e) from e
    if resp.value is None:
        raise MintLookupError(f"Mint account {mint} not found.")
    owner = str(resp.value.owner)
    if owner == SPL_TOKEN_PROGRAM_ID:
        return Pubkey.from_string(SPL_TOKEN_PROGRAM_ID)
    if owner == TOKEN_2022_PROGRAM_ID:
        return Pubkey.from_string(TOKEN_2022_PROGRAM_ID)
    raise MintLookupError(
        f"Unsupported token program: {owner}. Supported programs are SPL Token and Token 2022."
    )


async def get_mint_decimals(client: AsyncClient, mint: Pubkey, payer=None) -> int:
    """Read the decimal precision of ``mint``; native SOL is always 9."""
    if is_native_mint(mint):
        return NATIVE_DECIMALS
    program_id = await get_token_program(client, mint)
    token = AsyncToken(client, mint, program_id, payer)
    try:
        mint_info = await token.get_mint_info()
    except Exception as e:
        raise MintLookupError(f"Failed to read mint info for {mint}: {e}", cause=e) from e
    logger.debug(f"Mint {mint} has {mint_info.decimals} decimals")
    return mint_info.decimals
