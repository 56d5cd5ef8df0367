import logging
from typing import Optional

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from solagent.errors import BalanceError, SolAgentError
from solagent.utils.token import (
    NATIVE_DECIMALS,
    get_token_program,
    is_native_mint,
    smallest_units_to_human,
)
from solagent.utils.wallet import parse_pubkey

logger = logging.getLogger(__name__)


async def get_balance(
    client: AsyncClient, owner: Pubkey, token_address: Optional[str] = None
) -> float:
    """
    Balance of ``owner`` in human units.

    Without ``token_address`` this is the SOL balance; otherwise it is the
    balance of the owner's associated token account for that mint, or 0 when
    the account does not exist yet.
    """
    try:
        if is_native_mint(token_address):
            resp = await client.get_balance(owner, commitment=Confirmed)
            return smallest_units_to_human(resp.value, NATIVE_DECIMALS)

        mint = parse_pubkey(token_address, "token address")
        program_id = await get_token_program(client, mint)
        ata = get_associated_token_address(owner, mint, program_id)
        account = await client.get_account_info(ata, commitment=Confirmed)
        if account.value is None:
            logger.debug(f"No token account for {owner} / {mint}")
            return 0.0
        resp = await client.get_token_account_balance(ata, commitment=Confirmed)
        return float(resp.value.ui_amount_string)
    except SolAgentError:
        raise
    except Exception as e:
        raise BalanceError(f"Failed to fetch balance for {owner}: {e}", cause=e) from e
